"""
Verify that Folio can reach the remote data service.

Run it after configuring a new environment or when the admin area starts
showing "could not load" banners.

Usage:
    python manage.py check_folio
    python manage.py check_folio --verbose
    python manage.py check_folio --email me@example.com --password ...
    python manage.py check_folio --json

What this command checks:
    1. Remote backend configuration
    2. Every content table answers a count query
    3. Every media bucket can be listed
    4. Sign-in round trip (only when credentials are given)
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.management.base import BaseCommand

from folio.core.constants import MediaBucket
from folio.core.constants import RemoteTable
from folio.core.remote import RemoteServiceError
from folio.core.remote import get_remote_backend
from folio.core.session import RemoteSession

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    """Status of a health check."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: CheckStatus
    message: str
    details: str | None = None
    fix_hint: str | None = None


class Command(BaseCommand):
    """
    Verify the remote data service is reachable.

    Exits with status 1 when any check fails so it can gate deployments.
    """

    help = "Verify Folio can reach its remote tables, buckets and auth API"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.results: list[CheckResult] = []
        self.verbose = False
        self.json_output = False
        self.session: RemoteSession | None = None

    def add_arguments(self, parser):
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed output for each check",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Output results as JSON (for scripting)",
        )
        parser.add_argument("--email", help="Admin email for the sign-in check")
        parser.add_argument("--password", help="Admin password for the sign-in check")

    def handle(self, *args, **options):
        self.verbose = options.get("verbose", False)
        self.json_output = options.get("json", False)
        self.email = options.get("email")
        self.password = options.get("password")

        if not self.json_output:
            self.stdout.write("")
            self.stdout.write(self.style.HTTP_INFO("=" * 60))
            self.stdout.write(self.style.HTTP_INFO("  Folio Remote Check"))
            self.stdout.write(self.style.HTTP_INFO("=" * 60))
            self.stdout.write("")

        checks: list[tuple[str, Callable]] = [
            ("Configuration", self._check_configuration),
            ("Tables", self._check_tables),
            ("Buckets", self._check_buckets),
            ("Auth", self._check_auth),
        ]

        for section_name, check_func in checks:
            if not self.json_output:
                self.stdout.write(
                    self.style.MIGRATE_HEADING(f"Checking {section_name}..."),
                )
            try:
                check_func()
            except Exception as e:
                logger.exception("check_folio: %s check crashed", section_name)
                self._add_result(
                    section_name,
                    CheckStatus.ERROR,
                    f"Check failed with exception: {e}",
                )
            if not self.json_output:
                self.stdout.write("")

        if self.json_output:
            self._output_json()
        else:
            self._output_summary()

        if any(r.status == CheckStatus.ERROR for r in self.results):
            sys.exit(1)

    def _add_result(
        self,
        name: str,
        status: CheckStatus,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ):
        result = CheckResult(
            name=name,
            status=status,
            message=message,
            details=details,
            fix_hint=fix_hint,
        )
        self.results.append(result)

        if self.json_output:
            return

        if status == CheckStatus.OK:
            icon = self.style.SUCCESS("✓")
            msg = self.style.SUCCESS(message)
        elif status == CheckStatus.WARNING:
            icon = self.style.WARNING("!")
            msg = self.style.WARNING(message)
        elif status == CheckStatus.ERROR:
            icon = self.style.ERROR("✗")
            msg = self.style.ERROR(message)
        else:  # SKIPPED
            icon = self.style.NOTICE("-")
            msg = self.style.NOTICE(message)

        self.stdout.write(f"  {icon} {msg}")

        if self.verbose and details:
            for line in details.split("\n"):
                self.stdout.write(f"      {line}")

        if fix_hint and status in (CheckStatus.ERROR, CheckStatus.WARNING):
            self.stdout.write(f"      {self.style.NOTICE('Hint:')} {fix_hint}")

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_configuration(self):
        backend_setting = getattr(settings, "REMOTE_BACKEND", "supabase")
        try:
            backend = get_remote_backend()
        except (ImportError, RuntimeError) as e:
            self._add_result(
                "Configuration",
                CheckStatus.ERROR,
                f"Remote backend '{backend_setting}' could not be created: {e}",
                fix_hint="Check REMOTE_BACKEND, SUPABASE_URL and SUPABASE_ANON_KEY",
            )
            return

        self.session = RemoteSession.anonymous(backend)
        details = f"Backend: {backend.__class__.__name__}\nBase URL: {backend.base_url}"
        if backend_setting == "memory":
            self._add_result(
                "Configuration",
                CheckStatus.WARNING,
                "Using the in-process backend; content is not persisted",
                details=details,
                fix_hint="Set SUPABASE_URL and REMOTE_BACKEND=supabase",
            )
        else:
            self._add_result(
                "Configuration",
                CheckStatus.OK,
                f"Remote backend configured ({backend.base_url})",
                details=details,
            )

    def _check_tables(self):
        if self.session is None:
            self._add_result("Tables", CheckStatus.SKIPPED, "No remote backend")
            return
        for table in RemoteTable.values:
            try:
                total = self.session.count(table)
            except RemoteServiceError as e:
                self._add_result(
                    f"Table {table}",
                    CheckStatus.ERROR,
                    f"Cannot read table '{table}': {e}",
                    fix_hint="Check the table exists and allows anonymous reads",
                )
            else:
                self._add_result(
                    f"Table {table}",
                    CheckStatus.OK,
                    f"Table '{table}' reachable ({total} rows)",
                )

    def _check_buckets(self):
        if self.session is None:
            self._add_result("Buckets", CheckStatus.SKIPPED, "No remote backend")
            return
        for bucket in MediaBucket.values:
            try:
                names = self.session.list_objects(bucket, limit=1)
            except RemoteServiceError as e:
                self._add_result(
                    f"Bucket {bucket}",
                    CheckStatus.ERROR,
                    f"Cannot list bucket '{bucket}': {e}",
                    fix_hint="Check the bucket exists and is public",
                )
            else:
                self._add_result(
                    f"Bucket {bucket}",
                    CheckStatus.OK,
                    f"Bucket '{bucket}' reachable",
                    details=f"Sample object: {names[0]}" if names else "Bucket is empty",
                )

    def _check_auth(self):
        if not (self.email and self.password):
            self._add_result(
                "Auth",
                CheckStatus.SKIPPED,
                "No credentials given (use --email and --password)",
            )
            return
        if self.session is None:
            self._add_result("Auth", CheckStatus.SKIPPED, "No remote backend")
            return
        try:
            signed_in = RemoteSession.sign_in(
                self.session.backend,
                self.email,
                self.password,
            )
        except RemoteServiceError as e:
            self._add_result(
                "Auth",
                CheckStatus.ERROR,
                f"Sign-in failed: {e}",
                fix_hint="Check the admin account exists in the auth service",
            )
            return
        try:
            user = signed_in.fetch_user()
        finally:
            signed_in.close()
        self._add_result(
            "Auth",
            CheckStatus.OK,
            f"Signed in as {user.email if user else self.email}",
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _counts(self) -> dict[str, int]:
        return {
            "ok": sum(1 for r in self.results if r.status == CheckStatus.OK),
            "warnings": sum(1 for r in self.results if r.status == CheckStatus.WARNING),
            "errors": sum(1 for r in self.results if r.status == CheckStatus.ERROR),
            "skipped": sum(1 for r in self.results if r.status == CheckStatus.SKIPPED),
        }

    def _output_summary(self):
        self.stdout.write(self.style.HTTP_INFO("=" * 60))
        self.stdout.write(self.style.HTTP_INFO("  Summary"))
        self.stdout.write(self.style.HTTP_INFO("=" * 60))
        self.stdout.write("")

        counts = self._counts()
        self.stdout.write(f"  {self.style.SUCCESS('✓')} Passed:   {counts['ok']}")
        if counts["warnings"]:
            self.stdout.write(
                f"  {self.style.WARNING('!')} Warnings: {counts['warnings']}",
            )
        if counts["errors"]:
            self.stdout.write(f"  {self.style.ERROR('✗')} Errors:   {counts['errors']}")
        if counts["skipped"]:
            self.stdout.write(f"  {self.style.NOTICE('-')} Skipped:  {counts['skipped']}")

        self.stdout.write("")
        if counts["errors"]:
            self.stdout.write(
                self.style.ERROR("  Some checks failed. Please fix the errors above."),
            )
        elif counts["warnings"]:
            self.stdout.write(
                self.style.WARNING("  Folio is working but some warnings were found."),
            )
        else:
            self.stdout.write(self.style.SUCCESS("  All checks passed!"))
        self.stdout.write("")

    def _output_json(self):
        counts = self._counts()
        output = {
            "status": "error" if counts["errors"] else "ok",
            "checks": [
                {
                    "name": r.name,
                    "status": r.status.value,
                    "message": r.message,
                    "details": r.details,
                    "fix_hint": r.fix_hint,
                }
                for r in self.results
            ],
            "summary": counts,
        }
        self.stdout.write(json.dumps(output, indent=2))
