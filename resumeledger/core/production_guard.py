"""Production configuration guard — enforces hard constraints at start-up.

Runs once when the service is built and raises ``ProductionConfigError``
listing every violated constraint.  Outside production it does nothing.
"""

from __future__ import annotations

import logging

from resumeledger.config import DEFAULT_DATABASE_PATH, ServiceConfig

logger = logging.getLogger(__name__)


class ProductionConfigError(RuntimeError):
    """Raised when production configuration constraints are violated.

    The process should exit; this error must not be caught and ignored.
    """


def enforce_production_constraints(config: ServiceConfig) -> None:
    """Validate production-critical settings.

    Constraints enforced
    --------------------
    1. Debug mode must be disabled.
    2. The database path must be set explicitly.
    3. Transaction wait and execution budgets must be positive, and the
       wait budget must be shorter than the execution budget.
    """
    if not config.is_production:
        return

    violations: list[str] = []

    if config.debug:
        violations.append(
            "debug=True is not allowed in production. Set RESUMELEDGER_DEBUG=false."
        )

    if config.database_path == DEFAULT_DATABASE_PATH:
        violations.append(
            "database_path is the development default. Set RESUMELEDGER_DATABASE_PATH."
        )

    if config.tx_wait_seconds <= 0 or config.tx_timeout_seconds <= 0:
        violations.append("Transaction budgets must be positive.")
    elif config.tx_wait_seconds >= config.tx_timeout_seconds:
        violations.append(
            "tx_wait_seconds must be shorter than tx_timeout_seconds."
        )

    if violations:
        msg = (
            "Production configuration guard failed.\n"
            + "\n".join(f"  - {v}" for v in violations)
        )
        logger.critical(msg)
        raise ProductionConfigError(msg)

    logger.info("Production configuration guard passed.")
