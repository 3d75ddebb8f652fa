"""Plain-text and HTML bodies for transactional mail, keyed by template id."""

from html import escape


def cancellation_template(context: dict) -> tuple[str, str, str]:
    provider = context['provider']
    user = context['user']
    date = context['date']

    subject = 'Appointment canceled'
    text_body = (
        f'Hello, {provider}.\n\n'
        f'{user} canceled the appointment scheduled for {date}.\n'
        'The slot is available for new bookings again.\n'
    )
    html_body = (
        f'<p>Hello, <strong>{escape(provider)}</strong>.</p>'
        f'<p>{escape(user)} canceled the appointment scheduled for <strong>{escape(date)}</strong>.</p>'
        '<p>The slot is available for new bookings again.</p>'
    )
    return subject, text_body, html_body


TEMPLATES = {
    'cancellation': cancellation_template,
}


def render_template(template_id: str, context: dict) -> tuple[str, str, str]:
    try:
        template = TEMPLATES[template_id]
    except KeyError as exc:
        raise ValueError(f'Unknown mail template: {template_id}') from exc
    return template(context)
