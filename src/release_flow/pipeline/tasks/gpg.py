"""GPG key import for signing release commits and tags."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import structlog

from release_flow.pipeline.task import Task
from release_flow.vcs.gpg import import_gpg_key

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)

ENV_PRIVATE_KEY = "GPG_PRIVATE_KEY"
ENV_PASSPHRASE = "GPG_PASSPHRASE"
ENV_FINGERPRINT = "GPG_FINGERPRINT"


class GpgImportTask(Task):
    """Imports the key named by the GPG_* variables and enables signing."""

    def describe(self) -> str:
        return "importing gpg key"

    def skip(self, ctx: Context) -> bool:
        required = (ENV_PRIVATE_KEY, ENV_PASSPHRASE, ENV_FINGERPRINT)
        return not all(os.environ.get(name) for name in required)

    def run(self, ctx: Context) -> None:
        if ctx.dry_run:
            logger.info("would import gpg key", fingerprint=os.environ[ENV_FINGERPRINT])
            return

        key = import_gpg_key(
            os.environ[ENV_PRIVATE_KEY],
            os.environ[ENV_PASSPHRASE],
            os.environ[ENV_FINGERPRINT],
        )
        logger.info("imported gpg key", fingerprint=key.fingerprint, user=key.user_email)

        for name, value in (
            ("user.signingkey", key.fingerprint),
            ("commit.gpgsign", "true"),
            ("tag.gpgsign", "true"),
            ("user.name", key.user_name),
            ("user.email", key.user_email),
        ):
            ctx.repo.config_set(name, value)

        # Signed commits must carry the key's identity
        ctx.commit.author_name = key.user_name
        ctx.commit.author_email = key.user_email
