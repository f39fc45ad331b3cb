"""
Startup checks module for validating configuration before the bot connects.

This module validates:
- Discord bot token and optional guild id
- Completion API credentials and, optionally, connectivity
- The liveness endpoint port
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..config import (
    DISCORD_BOT_TOKEN,
    GUILD_ID,
    OPENROUTER_API_KEY,
    OPENROUTER_MODEL,
    OPENROUTER_BASE_URL,
    PORT,
)
from .logging import logger


class CheckStatus(Enum):
    """Status of a startup check."""
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"
    SKIP = "SKIP"


@dataclass
class CheckResult:
    """Result of a single startup check."""
    name: str
    status: CheckStatus
    message: str
    details: Optional[str] = None


CRITICAL_CHECKS = ("Discord Bot Token", "Completion API")


class StartupChecker:
    """Performs startup checks to validate configuration and connectivity."""

    def __init__(self, probe_completion_api: bool = False):
        """Initialize the startup checker.

        Args:
            probe_completion_api: If True, send a tiny request to the completion endpoint.
        """
        self.probe_completion_api = probe_completion_api
        self.results: List[CheckResult] = []

    def _add_result(
        self,
        name: str,
        status: CheckStatus,
        message: str,
        details: Optional[str] = None
    ) -> CheckResult:
        """Add a check result to the results list."""
        result = CheckResult(name=name, status=status, message=message, details=details)
        self.results.append(result)
        return result

    def check_discord_token(self) -> CheckResult:
        """Check if Discord bot token is configured."""
        if not DISCORD_BOT_TOKEN:
            return self._add_result(
                name="Discord Bot Token",
                status=CheckStatus.FAIL,
                message="DISCORD_BOT_TOKEN environment variable is not set",
                details="Set DISCORD_BOT_TOKEN in your .env file"
            )

        if len(DISCORD_BOT_TOKEN) < 50:
            return self._add_result(
                name="Discord Bot Token",
                status=CheckStatus.WARN,
                message="Discord token seems unusually short",
                details="Token may be invalid - verify in Discord Developer Portal"
            )

        return self._add_result(
            name="Discord Bot Token",
            status=CheckStatus.PASS,
            message="Discord bot token is configured"
        )

    def check_guild_id(self) -> CheckResult:
        """Check the optional guild id used for command registration."""
        if not GUILD_ID:
            return self._add_result(
                name="Guild ID",
                status=CheckStatus.SKIP,
                message="GUILD_ID not set, commands will be registered globally",
                details="Global commands can take up to an hour to appear"
            )

        if not GUILD_ID.isdigit():
            return self._add_result(
                name="Guild ID",
                status=CheckStatus.WARN,
                message=f"GUILD_ID '{GUILD_ID}' is not a numeric snowflake",
                details="Command registration will fail"
            )

        return self._add_result(
            name="Guild ID",
            status=CheckStatus.PASS,
            message=f"Commands will be registered for guild {GUILD_ID}"
        )

    def check_completion_api(self) -> CheckResult:
        """Check completion API configuration and, if enabled, connectivity."""
        if not OPENROUTER_API_KEY:
            return self._add_result(
                name="Completion API",
                status=CheckStatus.FAIL,
                message="OPENROUTER_API_KEY environment variable is not set",
                details="Set OPENROUTER_API_KEY in your .env file"
            )

        if not self.probe_completion_api:
            return self._add_result(
                name="Completion API",
                status=CheckStatus.PASS,
                message=f"Configured for model '{OPENROUTER_MODEL}'"
            )

        try:
            from openai import OpenAI

            client = OpenAI(api_key=OPENROUTER_API_KEY, base_url=OPENROUTER_BASE_URL, max_retries=0)
            client.chat.completions.create(
                model=OPENROUTER_MODEL,
                messages=[{"role": "user", "content": "test"}],
                max_tokens=5
            )

            return self._add_result(
                name="Completion API",
                status=CheckStatus.PASS,
                message=f"Connected, model '{OPENROUTER_MODEL}' answered"
            )

        except Exception as e:
            return self._add_result(
                name="Completion API",
                status=CheckStatus.WARN,
                message=f"Could not verify completion API connectivity: {type(e).__name__}",
                details="Commands will report the service as unavailable until it responds"
            )

    def check_health_port(self) -> CheckResult:
        """Check the liveness endpoint port."""
        if not 0 < PORT < 65536:
            return self._add_result(
                name="Health Port",
                status=CheckStatus.WARN,
                message=f"PORT {PORT} is outside the valid range",
                details="Set PORT to a value between 1 and 65535"
            )

        return self._add_result(
            name="Health Port",
            status=CheckStatus.PASS,
            message=f"Liveness endpoint on port {PORT}"
        )

    def run_all_checks(self) -> List[CheckResult]:
        """Run all startup checks and return results."""
        self.results = []

        logger.info("=" * 60)
        logger.info("STARTUP CHECKS")
        logger.info("=" * 60)

        checks = [
            ("Discord Bot Token", self.check_discord_token),
            ("Guild ID", self.check_guild_id),
            ("Completion API", self.check_completion_api),
            ("Health Port", self.check_health_port),
        ]

        for name, check_func in checks:
            try:
                result = check_func()
            except Exception as e:
                result = self._add_result(
                    name=name,
                    status=CheckStatus.FAIL,
                    message=f"Check failed with error: {type(e).__name__}: {e}"
                )
            self._log_result(result)

        logger.info("-" * 60)
        counts = {status: sum(1 for r in self.results if r.status == status) for status in CheckStatus}
        summary = f"Results: {counts[CheckStatus.PASS]} passed"
        if counts[CheckStatus.WARN]:
            summary += f", {counts[CheckStatus.WARN]} warnings"
        if counts[CheckStatus.FAIL]:
            summary += f", {counts[CheckStatus.FAIL]} failed"
        if counts[CheckStatus.SKIP]:
            summary += f", {counts[CheckStatus.SKIP]} skipped"

        logger.info(summary)
        logger.info("=" * 60)

        return self.results

    def _log_result(self, result: CheckResult) -> None:
        """Log a check result with appropriate formatting."""
        status_icons = {
            CheckStatus.PASS: "✓",
            CheckStatus.WARN: "⚠",
            CheckStatus.FAIL: "✗",
            CheckStatus.SKIP: "○",
        }

        log_msg = f"[{status_icons.get(result.status, '?')}] {result.name}: {result.message}"

        if result.status == CheckStatus.WARN:
            log_func = logger.warning
        elif result.status == CheckStatus.FAIL:
            log_func = logger.error
        else:
            log_func = logger.info

        log_func(log_msg)
        if result.details and result.status != CheckStatus.PASS:
            log_func(f"    └─ {result.details}")

    def has_critical_failures(self) -> bool:
        """Check if any critical checks failed (Discord token, completion API)."""
        return any(
            r.name in CRITICAL_CHECKS and r.status == CheckStatus.FAIL
            for r in self.results
        )

    def get_failures(self) -> List[CheckResult]:
        """Get all failed check results."""
        return [r for r in self.results if r.status == CheckStatus.FAIL]

    def get_warnings(self) -> List[CheckResult]:
        """Get all warning check results."""
        return [r for r in self.results if r.status == CheckStatus.WARN]


def run_startup_checks(exit_on_critical: bool = True, probe_completion_api: bool = False) -> StartupChecker:
    """Run all startup checks and optionally exit on critical failures.

    Args:
        exit_on_critical: If True, raise SystemExit on critical failures.
        probe_completion_api: If True, verify the completion endpoint answers.

    Returns:
        The StartupChecker instance with results.

    Raises:
        SystemExit: If exit_on_critical is True and critical checks fail.
    """
    checker = StartupChecker(probe_completion_api=probe_completion_api)
    checker.run_all_checks()

    if exit_on_critical and checker.has_critical_failures():
        failure_names = [f.name for f in checker.get_failures()]
        raise SystemExit(
            f"Critical startup checks failed: {', '.join(failure_names)}. "
            "Please fix these issues before starting the bot."
        )

    return checker
