"""
lot_server.py
=================

Servidor Flask que expone el asignador de plazas del aparcamiento. Todo el
estado vive en memoria (se pierde al reiniciar).

Contratos soportados (recurso base /parking-lots):
- POST   /parking-lots {"capacity": int>=1}
  -> 201 {"message": str, "capacity": int}
- PATCH  /parking-lots {"addCapacity": int>=1}
  -> 200 {"message": str, "oldCapacity": int, "newCapacity": int}
- POST   /parking-lots/parkings {"registrationNumber": "KA-01-HH-1234", "color": "White"}
  -> 201 {"slotNumber": int, "registrationNumber": str, "color": str}
- DELETE /parking-lots/parkings?slotNumber=N | ?registrationNumber=R
  -> 200 {"message": str, "freedSlotNumber": int}
- GET    /parking-lots/status -> [{"slotNumber", "registrationNumber", "color"}, ...]
- GET    /parking-lots/registrations?color=C -> ["KA-01-HH-1234", ...]
- GET    /parking-lots/slots?color=C -> [1, 3, ...]
- GET    /parking-lots/slots?registrationNumber=R -> {"slotNumber": int}
- GET    /parking-lots/internal-state
  -> {"totalSlots", "isInitialized", "occupiedCount", "availableCount"}
- GET    /health -> {"ok": true, "version": str}

Errores: {"error": str} con 400 (argumento invalido / sin inicializar),
409 (lleno / ya aparcado), 404 (no encontrado / plaza ya libre).

Ejecucion local:
  $env:PORT=3000; python lot_server.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from flask import Flask, jsonify, request, Response
from flask_cors import CORS

from core import __version__, parse_int, parse_positive_int, sanitize_registration, sanitize_text
from parking_lot.config import LOG_LEVELS, LotServerConfig
from parking_lot.core.errors import (
    AlreadyFreeError,
    AlreadyParkedError,
    DomainError,
    InvalidArgumentError,
    InvariantViolation,
    LotFullError,
    NotFoundError,
    NotInitializedError,
)
from parking_lot.core.service import SlotAllocator


logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[type, int] = {
    InvalidArgumentError: 400,
    NotInitializedError: 400,
    LotFullError: 409,
    AlreadyParkedError: 409,
    NotFoundError: 404,
    AlreadyFreeError: 404,
}


def status_for(err: DomainError) -> int:
    for cls, code in STATUS_BY_ERROR.items():
        if isinstance(err, cls):
            return code
    return 400


def _error(message: str, code: int = 400) -> Tuple[Response, int]:
    return jsonify({"error": message}), code


def _read_body(allowed: Iterable[str]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Cuerpo JSON como dict; rechaza campos fuera de `allowed`."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None, "Request body must be a JSON object."
    extra = sorted(set(payload) - set(allowed))
    if extra:
        return None, f"Unexpected field(s): {', '.join(extra)}."
    return payload, None


def create_app(allocator: Optional[SlotAllocator] = None) -> Flask:
    """Construye la app Flask sobre `allocator` (uno nuevo si no se pasa)."""
    lot = allocator if allocator is not None else SlotAllocator()
    app = Flask(__name__)
    CORS(app)  # CORS abierto en todas las rutas
    app.extensions["slot_allocator"] = lot

    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError) -> Tuple[Response, int]:
        code = status_for(err)
        logger.debug("Request rejected (%d): %s", code, err)
        return _error(str(err), code)

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(err: InvariantViolation) -> Tuple[Response, int]:
        logger.error("Slot allocator invariant violated: %s", err, exc_info=err)
        return _error("Internal allocator error.", 500)

    @app.get("/health")
    def health() -> Response:
        return jsonify({"ok": True, "version": __version__})

    @app.post("/parking-lots")
    def create_parking_lot() -> Tuple[Response, int]:
        payload, err = _read_body({"capacity"})
        if err:
            return _error(err)
        capacity = parse_positive_int(payload.get("capacity"))
        if capacity is None:
            return _error("capacity must be an integer >= 1.")
        lot.initialize(capacity)
        return jsonify({"message": "Parking lot created successfully.", "capacity": capacity}), 201

    @app.patch("/parking-lots")
    def expand_parking_lot() -> Response:
        payload, err = _read_body({"addCapacity"})
        if err:
            return _error(err)
        additional = parse_positive_int(payload.get("addCapacity"))
        if additional is None:
            return _error("addCapacity must be an integer >= 1.")
        change = lot.expand(additional)
        return jsonify({
            "message": f"Added {change.added} slots successfully.",
            "oldCapacity": change.old_capacity,
            "newCapacity": change.new_capacity,
        })

    @app.post("/parking-lots/parkings")
    def park_car() -> Tuple[Response, int]:
        payload, err = _read_body({"registrationNumber", "color"})
        if err:
            return _error(err)
        registration = sanitize_registration(payload.get("registrationNumber"))
        if not registration:
            return _error("Registration number should contain only uppercase letters, numbers, and hyphens.")
        color = sanitize_text(payload.get("color"))
        if not color:
            return _error("color must be a non-empty string.")
        parked = lot.park(registration, color)
        return jsonify(parked.to_dict()), 201

    @app.delete("/parking-lots/parkings")
    def unpark_car() -> Response:
        slot_raw = request.args.get("slotNumber")
        registration = request.args.get("registrationNumber")
        if slot_raw is not None:
            slot_number = parse_int(slot_raw)
            if slot_number is None:
                return _error("Invalid slot number format.")
            freed = lot.unpark_by_slot(slot_number)
        elif registration is not None:
            freed = lot.unpark_by_registration(registration)
        else:
            return _error("Provide either slotNumber or registrationNumber to unpark.")
        return jsonify({"message": f"Slot number {freed} is free.", "freedSlotNumber": freed})

    @app.get("/parking-lots/status")
    def get_status() -> Response:
        return jsonify([car.to_dict() for car in lot.status()])

    @app.get("/parking-lots/registrations")
    def get_registrations_by_color() -> Response:
        color = request.args.get("color")
        if not color:
            return _error('Query parameter "color" is required.')
        return jsonify(lot.registrations_by_color(color))

    @app.get("/parking-lots/slots")
    def get_slots() -> Response:
        color = request.args.get("color")
        registration = request.args.get("registrationNumber")
        if color is not None:
            return jsonify(lot.slots_by_color(color))
        if registration is not None:
            return jsonify({"slotNumber": lot.slot_by_registration(registration)})
        return _error('Provide either "color" or "registrationNumber" query parameter.')

    @app.get("/parking-lots/internal-state")
    def get_internal_state() -> Response:
        return jsonify(lot.current_state().to_dict())

    return app


CONFIG = LotServerConfig.from_env()
ALLOCATOR = SlotAllocator(strict=CONFIG.strict)
app = create_app(ALLOCATOR)


def main(argv: Optional[list[str]] = None) -> None:
    """Punto de entrada: arranca el servidor en el host/puerto indicados."""
    parser = argparse.ArgumentParser(description="Parking lot slot allocator HTTP server")
    parser.add_argument("--host", default=CONFIG.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=CONFIG.port, help="TCP port")
    parser.add_argument("--log-level", default=CONFIG.log_level, choices=LOG_LEVELS, help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Parking lot server %s listening on %s:%d", __version__, args.host, args.port)
    app.run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
