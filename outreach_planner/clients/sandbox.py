"""
Sandbox control for landing page generation.

The landing page generator only needs four capabilities from a sandbox:
create one, dispatch a command, read a file back, and destroy it. The
Protocols below describe exactly that; ModalSandboxProvider implements it
on top of modal.Sandbox.
"""

from typing import Any, List, Optional, Protocol

import modal
from loguru import logger
from pydantic import BaseModel, Field

from .. import config


class SandboxSpec(BaseModel):
    """Resources and limits for one sandbox"""

    cpu: float = Field(2.0, description="vCPU-equivalents")
    memory_mib: int = Field(2048, description="Memory limit in MiB")
    timeout_seconds: int = Field(300, description="Maximum sandbox lifetime")
    idle_timeout_seconds: int = Field(300, description="Idle time before shutdown")
    network_enabled: bool = Field(True, description="Allow outbound network access")


class SandboxHandle(Protocol):
    id: str

    async def execute(self, command: List[str], timeout_seconds: int) -> Any: ...

    async def read_file(self, path: str) -> bytes: ...

    async def destroy(self) -> None: ...


class SandboxProvider(Protocol):
    async def create(self, spec: SandboxSpec) -> SandboxHandle: ...


def sandbox_secrets() -> List[modal.Secret]:
    """
    Model-provider credentials for OpenCode inside the sandbox.

    A named Modal secret wins; otherwise OPENAI_API_KEY is forwarded.
    """
    if config.MODAL_SECRET_NAME:
        return [modal.Secret.from_name(config.MODAL_SECRET_NAME)]

    if config.OPENAI_API_KEY:
        return [modal.Secret.from_dict({"OPENAI_API_KEY": config.OPENAI_API_KEY})]

    logger.warning("No model credentials configured for the sandbox; OpenCode will not be able to run")
    return []


def opencode_image() -> modal.Image:
    """Debian image with the OpenCode CLI installed"""
    return (
        modal.Image.debian_slim()
        .apt_install("curl", "nodejs", "npm")
        .run_commands("npm install -g opencode-ai")
    )


class ModalSandboxHandle:
    """A running modal.Sandbox"""

    def __init__(self, sandbox: modal.Sandbox):
        self._sandbox = sandbox
        self.id = sandbox.object_id

    async def execute(self, command: List[str], timeout_seconds: int) -> Any:
        """Start a command; returns as soon as it is dispatched"""
        process = await self._sandbox.exec.aio(*command, timeout=timeout_seconds)
        logger.debug(f"Dispatched {command[0]} in sandbox {self.id}")
        return process

    async def read_file(self, path: str) -> bytes:
        """Read a file from the sandbox filesystem. Raises if it does not exist."""
        handle = await self._sandbox.open.aio(path, "rb")
        try:
            return await handle.read.aio()
        finally:
            await handle.close.aio()

    async def destroy(self) -> None:
        await self._sandbox.terminate.aio()


class ModalSandboxProvider:
    """
    Creates sandboxes on Modal.

    Usage:
        provider = ModalSandboxProvider()
        handle = await provider.create(SandboxSpec())
    """

    def __init__(
        self,
        app_name: Optional[str] = None,
        image: Optional[modal.Image] = None,
        secrets: Optional[List[modal.Secret]] = None,
    ):
        """
        Args:
            app_name: Modal app the sandboxes attach to
            image: Sandbox image. Defaults to one with OpenCode installed.
            secrets: Credentials exposed to OpenCode. Defaults to sandbox_secrets().
        """
        self.app_name = app_name or config.MODAL_APP_NAME
        self.image = image
        self.secrets = secrets

    async def create(self, spec: SandboxSpec) -> ModalSandboxHandle:
        app = await modal.App.lookup.aio(self.app_name, create_if_missing=True)

        sandbox = await modal.Sandbox.create.aio(
            app=app,
            image=self.image or opencode_image(),
            cpu=spec.cpu,
            memory=spec.memory_mib,
            timeout=spec.timeout_seconds,
            idle_timeout=spec.idle_timeout_seconds,
            block_network=not spec.network_enabled,
            secrets=self.secrets if self.secrets is not None else sandbox_secrets(),
        )

        return ModalSandboxHandle(sandbox)
