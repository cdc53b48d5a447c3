from datetime import datetime
from html import escape

from backend.core.timeutils import format_slot
from backend.jobs.mail import Mailer

KEY = 'CancellationMail'


def cancellation_template(provider_name: str, user_name: str, formatted_date: str) -> str:
    return f"""
    <div style="font-family: Arial, Helvetica, sans-serif; font-size: 16px; line-height: 1.6; color: #333;">
      <strong>Olá, {escape(provider_name)}</strong>
      <p>Houve um cancelamento de horário, confira os detalhes abaixo:</p>
      <p>
        <strong>Cliente: </strong> {escape(user_name)}<br />
        <strong>Data/hora: </strong> {escape(formatted_date)}<br />
        <br />
        <small>O horário está novamente disponível para novos agendamentos.</small>
      </p>
    </div>
    """


def handle(payload: dict, mailer: Mailer | None = None) -> None:
    """Tell the provider that one of their appointments was canceled."""
    appointment = payload['appointment']
    provider = appointment['provider']
    user = appointment['user']
    date = datetime.fromisoformat(appointment['date'])

    mailer = mailer or Mailer()
    mailer.send(
        to=f"{provider['name']} <{provider['email']}>",
        subject='Agendamento cancelado',
        html=cancellation_template(provider['name'], user['name'], format_slot(date)),
    )
