from __future__ import annotations

import importlib
from typing import Iterable

from dotenv import load_dotenv
from loguru import logger

from config import get_settings_module

from .common.logger import setup_logger
from .container import Container, build_container
from .loans.model import EmployeeSnapshot


def create_engine(employees: Iterable[EmployeeSnapshot] = ()) -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    setup_logger(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_file=getattr(settings, "LOG_FILE", "") or None,
        audit_file=getattr(settings, "AUDIT_LOG_FILE", "") or None,
    )
    if getattr(settings, "DEBUG", False):
        logger.debug(f"settings={settings_module} chains={len(getattr(settings, 'APPROVAL_CHAINS', []))}")

    return build_container(settings=settings, employees=employees)
