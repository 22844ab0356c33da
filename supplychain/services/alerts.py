"""
Alerte stock bas.

Scan quotidien (lecture seule) des matières premières sous leur stock
minimum. Si la liste n'est pas vide, un rapport HTML est envoyé par SMTP.
Les erreurs de scan ou d'envoi sont journalisées, jamais propagées : le job
ne doit pas tomber.
"""

from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email import policy
from email.message import EmailMessage
from pathlib import Path
from ssl import create_default_context
from typing import Callable, Sequence

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy import select
from sqlalchemy.orm import Session

from supplychain.app.core.config import Settings
from supplychain.app.db.models.models_v1 import RawMaterial

logger = logging.getLogger(__name__)

LOW_STOCK_JOB_ID = "low_stock_check"
SUBJECT = "ALERTE STOCK CRITIQUE - SupplyChainX"
TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "app" / "templates"

PRIORITY_LABELS = {"high": "Haute", "medium": "Moyenne", "low": "Basse"}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def priority_for(deficit: int) -> str:
    if deficit > 50:
        return "high"
    if deficit > 20:
        return "medium"
    return "low"


def find_low_stock_materials(db: Session) -> list[RawMaterial]:
    return list(
        db.execute(
            select(RawMaterial)
            .where(RawMaterial.stock < RawMaterial.stock_min)
            .order_by(RawMaterial.id.asc())
        )
        .scalars()
        .all()
    )


def render_low_stock_report(
    materials: Sequence[RawMaterial],
    generated_at: datetime | None = None,
    app_name: str = "SupplyChainX",
) -> str:
    rows = [
        {
            "id": m.id,
            "name": m.name,
            "stock": m.stock,
            "stock_min": m.stock_min,
            "deficit": m.stock_min - m.stock,
            "unit": m.unit,
            "priority": priority_for(m.stock_min - m.stock),
        }
        for m in materials
    ]
    counts = {key: sum(1 for r in rows if r["priority"] == key) for key in PRIORITY_LABELS}

    return _env.get_template("low_stock_alert.html").render(
        app_name=app_name,
        generated_at=generated_at or datetime.now(),
        rows=rows,
        counts=counts,
        total_deficit=sum(r["deficit"] for r in rows),
        priority_labels=PRIORITY_LABELS,
    )


def build_low_stock_message(html_body: str, recipients: Sequence[str], sender: str | None) -> EmailMessage:
    message = EmailMessage(policy=policy.default)
    message["Subject"] = SUBJECT
    if sender:
        message["From"] = sender
    message["To"] = ", ".join(recipients)
    message.set_content("Ouvrez ce message dans un client compatible HTML pour voir le rapport de stock.")
    message.add_alternative(html_body, subtype="html")
    return message


def send_low_stock_alert(
    materials: Sequence[RawMaterial],
    settings: Settings,
    generated_at: datetime | None = None,
) -> None:
    recipients = settings.low_stock_recipients
    if not recipients:
        raise RuntimeError("LOW_STOCK_EMAIL_TO must list at least one recipient")
    if not settings.SMTP_HOST:
        raise RuntimeError("SMTP_HOST must be configured to send low stock alerts")

    html_body = render_low_stock_report(materials, generated_at, app_name=settings.APP_NAME)
    message = build_low_stock_message(html_body, recipients, settings.SMTP_SENDER or settings.SMTP_USERNAME)

    smtp_class = smtplib.SMTP_SSL if settings.SMTP_USE_SSL else smtplib.SMTP
    with smtp_class(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as client:
        client.ehlo()
        if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
            client.starttls(context=create_default_context())
            client.ehlo()
        if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
            client.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        client.send_message(message)

    logger.info("Low stock alert email sent to %s recipient(s)", len(recipients))


def run_low_stock_check(
    session_factory: Callable[[], Session],
    settings: Settings,
    sender: Callable[..., None] = send_low_stock_alert,
) -> int:
    """Retourne le nombre de matières sous le minimum (0 si le scan échoue)."""
    logger.info("Starting low stock check at %s", datetime.now().isoformat(timespec="seconds"))

    try:
        with session_factory() as db:
            materials = find_low_stock_materials(db)
            if not materials:
                logger.info("No materials below minimum stock level")
                return 0

            logger.warning("Found %s material(s) below minimum stock level:", len(materials))
            for m in materials:
                logger.warning(
                    "  - %s (ID: %s): Stock=%s, Min=%s, Deficit=%s",
                    m.name,
                    m.id,
                    m.stock,
                    m.stock_min,
                    m.stock_min - m.stock,
                )

            try:
                sender(materials, settings)
            except Exception:
                logger.exception("Failed to send low stock alert email")

            return len(materials)
    except Exception:
        logger.exception("Error during low stock check")
        return 0


def start_low_stock_scheduler(
    settings: Settings,
    session_factory: Callable[[], Session],
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_low_stock_check,
        trigger=CronTrigger.from_crontab(settings.LOW_STOCK_CRON),
        id=LOW_STOCK_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        args=[session_factory, settings],
    )
    scheduler.start()
    logger.info("Low stock scheduler started (cron: %s)", settings.LOW_STOCK_CRON)
    return scheduler
