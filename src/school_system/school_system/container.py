from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classrooms.mysql_classroom_repository import MySQLClassroomRepository
from .classrooms.repository import ClassroomRepository
from .classrooms.service import ClassroomService
from .common.guards import AuthGuard
from .core.constants import RESET_TOKEN_TTL_HOURS, SESSION_TOKEN_TTL_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .mail.sender import EmailSender, MailSettings, SmtpEmailSender
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .schedules.availability import ScheduleAvailabilityResolver
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import AuthSettings, TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classrooms_repo: ClassroomRepository
    groups_repo: GroupRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    payments_repo: PaymentRepository
    notifications_repo: NotificationRepository

    token_service: TokenService
    auth_guard: AuthGuard
    mailer: EmailSender

    notification_service: NotificationService
    auth_service: AuthService
    user_service: UserService
    classroom_service: ClassroomService
    group_service: GroupService
    schedule_service: ScheduleService
    availability_resolver: ScheduleAvailabilityResolver
    attendance_service: AttendanceService
    payment_service: PaymentService


def wire_container(
    *,
    users_repo: UserRepository,
    classrooms_repo: ClassroomRepository,
    groups_repo: GroupRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
    payments_repo: PaymentRepository,
    notifications_repo: NotificationRepository,
    auth_settings: AuthSettings,
    mailer: EmailSender,
    reset_url: str,
) -> Container:
    """Assemble services on top of any set of repositories (MySQL or in-memory)."""

    token_service = TokenService(auth_settings)
    notification_service = NotificationService(notifications_repo)

    return Container(
        users_repo=users_repo,
        classrooms_repo=classrooms_repo,
        groups_repo=groups_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        notifications_repo=notifications_repo,
        token_service=token_service,
        auth_guard=AuthGuard(token_service),
        mailer=mailer,
        notification_service=notification_service,
        auth_service=AuthService(
            users_repo,
            notification_service,
            token_service,
            mailer,
            auth_settings,
            reset_url=reset_url,
        ),
        user_service=UserService(users_repo),
        classroom_service=ClassroomService(classrooms_repo, schedules_repo),
        group_service=GroupService(groups_repo, users_repo),
        schedule_service=ScheduleService(schedules_repo, groups_repo, classrooms_repo),
        availability_resolver=ScheduleAvailabilityResolver(schedules_repo, classrooms_repo, groups_repo, users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, schedules_repo),
        payment_service=PaymentService(payments_repo, users_repo, notification_service),
    )


def build_container(*, db_config: dict, auth_config: dict, mail_config: dict, reset_url: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    auth_settings = AuthSettings(
        secret_key=str(auth_config["secret_key"]),
        admin_registration_key=auth_config.get("admin_registration_key") or None,
        token_ttl=timedelta(days=int(auth_config.get("token_ttl_days", SESSION_TOKEN_TTL_DAYS))),
        reset_token_ttl=timedelta(hours=int(auth_config.get("reset_token_ttl_hours", RESET_TOKEN_TTL_HOURS))),
    )

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        classrooms_repo=MySQLClassroomRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        auth_settings=auth_settings,
        mailer=SmtpEmailSender(MailSettings.from_dict(mail_config)),
        reset_url=reset_url,
    )
