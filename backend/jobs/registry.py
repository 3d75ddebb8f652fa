from backend.jobs.cancellation_mail import CANCELLATION_MAIL_KEY, send_cancellation_mail
from backend.jobs.provider_notification import PROVIDER_NOTIFICATION_KEY, create_provider_notification


def build_job_registry() -> dict:
    """Map each job key the API enqueues to the coroutine that runs it."""
    return {
        CANCELLATION_MAIL_KEY: send_cancellation_mail,
        PROVIDER_NOTIFICATION_KEY: create_provider_notification,
    }
