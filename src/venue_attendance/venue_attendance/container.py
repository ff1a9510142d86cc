from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.workflow.registry import SessionRegistry
from .attendance.workflow.session import CheckInSession
from .database.connection import DBConfig, DatabaseConnection
from .incidents.mysql_incident_repository import MySQLIncidentRepository
from .incidents.service import IncidentService
from .monitor.aggregator import PresenceMonitor
from .payroll.service import PayrollReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .storage.images import LocalImageStore
from .users.model import Worker
from .users.mysql_worker_repository import MySQLWorkerRepository
from .users.service import AuthService, WorkerService
from .venues.mysql_venue_repository import MySQLVenueRepository
from .venues.service import VenueService
from .vision.gemini_validator import GeminiPhotoValidator
from .vision.validator import PhotoValidator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    workers_repo: MySQLWorkerRepository
    venues_repo: MySQLVenueRepository
    attendance_repo: MySQLAttendanceRepository
    incidents_repo: MySQLIncidentRepository
    settings_repo: MySQLSettingsRepository

    images: LocalImageStore
    validator: PhotoValidator

    auth_service: AuthService
    worker_service: WorkerService
    venue_service: VenueService
    attendance_service: AttendanceService
    incident_service: IncidentService
    payroll_report_service: PayrollReportService
    settings_service: SettingsService
    presence_monitor: PresenceMonitor
    checkin_sessions: SessionRegistry


def build_container(
    *,
    db_config: dict,
    upload_dir: str,
    upload_url_prefix: str = "/uploads",
    gemini_api_key: Optional[str] = None,
    gemini_model: str = "gemini-2.5-flash",
    ai_timeout_seconds: float = 30,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    workers_repo = MySQLWorkerRepository(conn)
    venues_repo = MySQLVenueRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    incidents_repo = MySQLIncidentRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)

    images = LocalImageStore(upload_dir, url_prefix=upload_url_prefix)
    validator = GeminiPhotoValidator(
        gemini_api_key,
        model=gemini_model,
        timeout=ai_timeout_seconds,
        local_loader=images.load,
    )

    def new_session(worker: Worker) -> CheckInSession:
        return CheckInSession(
            worker,
            venues=venues_repo,
            attendance=attendance_repo,
            validator=validator,
            images=images,
        )

    return Container(
        conn=conn,
        workers_repo=workers_repo,
        venues_repo=venues_repo,
        attendance_repo=attendance_repo,
        incidents_repo=incidents_repo,
        settings_repo=settings_repo,
        images=images,
        validator=validator,
        auth_service=AuthService(workers_repo),
        worker_service=WorkerService(workers_repo, images),
        venue_service=VenueService(venues_repo),
        attendance_service=AttendanceService(attendance_repo),
        incident_service=IncidentService(incidents_repo, workers_repo),
        payroll_report_service=PayrollReportService(attendance_repo, workers_repo, incidents_repo),
        settings_service=SettingsService(settings_repo, images),
        presence_monitor=PresenceMonitor(venues=venues_repo, workers=workers_repo, attendance=attendance_repo),
        checkin_sessions=SessionRegistry(new_session),
    )
