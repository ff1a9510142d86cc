from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty, require_number
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..schedules.model import parse_schedule
from ..storage.images import Fallback, ImageStore, is_data_url
from .model import Worker
from .repository import WorkerRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    worker_id: int
    name: str
    role: Role
    legajo: str


class AuthService:
    """Use case: authenticate a worker by badge number or national id."""

    def __init__(self, workers: WorkerRepository):
        self._workers = workers

    def authenticate(self, identifier: str, password: str) -> Worker:
        identifier = (identifier or "").strip()
        worker = self._workers.find_by_identifier(identifier) if identifier else None
        if not worker:
            raise AuthenticationError("Credenciales incorrectas")

        try:
            ok = check_password_hash(worker.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Credenciales incorrectas")
        return worker

    @staticmethod
    def to_session_user(worker: Worker) -> SessionUser:
        return SessionUser(worker_id=worker.worker_id, name=worker.name, role=worker.role, legajo=worker.legajo)


class WorkerService:
    """Use case: manage workers (admin)."""

    def __init__(self, workers: WorkerRepository, images: ImageStore):
        self._workers = workers
        self._images = images

    def list_workers(self):
        return self._workers.list_all()

    def get_worker(self, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(int(worker_id))
        if not worker:
            raise NotFoundError("Usuario inexistente")
        return worker

    def _store_reference_image(self, value: Optional[str], *, dni: str, previous: Optional[str]) -> Optional[str]:
        if not is_data_url(value):
            return value or previous

        outcome = self._images.upload(value, folder="users", file_name=f"{dni}_ref_{int(time.time() * 1000)}.jpg")
        if isinstance(outcome, Fallback):
            _logger.warning("Reference image for dni=%s not stored (%s); keeping previous", dni, outcome.reason)
            return previous
        return outcome.url

    def save_worker(self, *, current_role: Role, data: dict[str, Any], worker_id: Optional[int] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")

        name = require_non_empty(data.get("name", ""), "Nombre")
        dni = require_non_empty(data.get("dni", ""), "DNI")
        legajo = (data.get("legajo") or "").strip()
        try:
            role = Role(data.get("role") or Role.OTHER.value)
        except ValueError:
            raise ValidationError("Rol inválido")

        hourly_rate = require_number(data.get("hourly_rate") or 0, "Valor hora")
        if hourly_rate < 0:
            raise ValidationError("El valor hora no puede ser negativo")

        schedule = parse_schedule(data.get("schedule"))
        try:
            assigned = [int(v) for v in data.get("assigned_locations") or []]
        except (TypeError, ValueError):
            raise ValidationError("Salones asignados inválidos")

        password = data.get("password") or ""
        existing = self._workers.get_by_id(int(worker_id)) if worker_id else None
        if worker_id and not existing:
            raise NotFoundError("Usuario inexistente")

        other = self._workers.find_by_identifier(dni)
        if other and (not existing or other.worker_id != existing.worker_id) and other.dni == dni:
            raise ValidationError("El DNI ya está registrado")

        fields = dict(
            legajo=legajo,
            dni=dni,
            name=name,
            role=role,
            dress_code=(data.get("dress_code") or "").strip(),
            reference_image=self._store_reference_image(
                data.get("reference_image"), dni=dni, previous=existing.reference_image if existing else None
            ),
            schedule=schedule,
            assigned_locations=assigned,
            hourly_rate=hourly_rate,
        )

        if existing:
            password_hash = None
            if password:
                require_min_length(password, "Contraseña", MIN_PASSWORD_LENGTH)
                password_hash = generate_password_hash(password)
            self._workers.update(worker_id=existing.worker_id, password_hash=password_hash, **fields)
            return existing.worker_id

        require_min_length(password, "Contraseña", MIN_PASSWORD_LENGTH)
        return self._workers.create(password_hash=generate_password_hash(password), **fields)

    def delete_worker(self, *, current_role: Role, current_worker_id: int, worker_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")
        if int(worker_id) == int(current_worker_id):
            raise ValidationError("No puede eliminar su propio usuario")
        if not self._workers.delete_by_id(int(worker_id)):
            raise NotFoundError("Usuario inexistente")
