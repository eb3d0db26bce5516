"""
App Runner.

Lifecycle operations for Docker apps running as Diego LRPs. The receptor is
the only source of truth: every mutation first re-reads desired state, then
acts once. Nothing is cached between calls and nothing is retried.

The read-then-act check is optimistic. Another client can change desired
state between the read and the write; the receptor's answer to the write
is what the caller sees.

Usage:
    from lattice.app_runner import AppRunner

    runner = AppRunner(receptor_client, "192.168.11.11.xip.io")
    await runner.start_docker_app(
        "my-app", "docker:///org/image", "/start", [], {}, False, 128, 1024, 8080,
    )
    await runner.scale_app("my-app", 3)
"""

from lattice.core.exceptions import AppAlreadyRunningError, AppNotStartedError
from lattice.core.logging import get_logger
from lattice.receptor.client import ReceptorClient
from lattice.receptor.models import (
    ActualLRPState,
    DesiredLRPCreateRequest,
    DesiredLRPUpdateRequest,
    DownloadAction,
    EnvironmentVariable,
    RunAction,
)

logger = get_logger(__name__)

LRP_DOMAIN = "diego-edge"
STACK = "lucid64"
APP_LOG_SOURCE = "APP"
HEALTH_LOG_SOURCE = "HEALTH"

CIRCUS_TARBALL_URL = "http://file_server.service.dc1.consul:8080/v1/static/docker-circus/docker-circus.tgz"
CIRCUS_DESTINATION = "/tmp"
HEALTH_CHECK_PATH = "/tmp/spy"


class AppRunner:
    """
    Starts, scales, removes and inspects apps through a receptor client.

    The system domain is fixed at construction and used to build each app's
    route, ``<name>.<system_domain>``.
    """

    def __init__(self, receptor_client: ReceptorClient, system_domain: str) -> None:
        self._receptor_client = receptor_client
        self._system_domain = system_domain

    @property
    def system_domain(self) -> str:
        return self._system_domain

    def route(self, name: str) -> str:
        """Public route an app is exposed on."""
        return f"{name}.{self._system_domain}"

    async def start_docker_app(
        self,
        name: str,
        docker_image_path: str,
        start_command: str,
        app_args: list[str],
        environment_variables: dict[str, str],
        privileged: bool,
        memory_mb: int,
        disk_mb: int,
        port: int,
    ) -> None:
        """
        Desire a single instance of a Docker image.

        Raises:
            AppAlreadyRunningError: If a desired LRP named ``name`` exists
            ReceptorError, httpx.HTTPError: Propagated from the receptor
        """
        if await self._desired_lrp_exists(name):
            raise AppAlreadyRunningError(name)

        self._log_operation("Desiring LRP", process_guid=name, root_fs=docker_image_path, port=port)

        await self._receptor_client.create_desired_lrp(
            self._build_create_request(
                name,
                docker_image_path,
                start_command,
                app_args,
                environment_variables,
                privileged,
                memory_mb,
                disk_mb,
                port,
            )
        )

    async def scale_app(self, name: str, instances: int) -> None:
        """
        Set the instance count of a started app. No other field is touched.

        Raises:
            AppNotStartedError: If no desired LRP named ``name`` exists
            ReceptorError, httpx.HTTPError: Propagated from the receptor
        """
        if not await self._desired_lrp_exists(name):
            raise AppNotStartedError(name)

        self._log_operation("Scaling LRP", process_guid=name, instances=instances)

        await self._receptor_client.update_desired_lrp(
            name, DesiredLRPUpdateRequest(instances=instances)
        )

    async def remove_app(self, name: str) -> None:
        """
        Delete a started app's desired LRP.

        Raises:
            AppNotStartedError: If no desired LRP named ``name`` exists
            ReceptorError, httpx.HTTPError: Propagated from the receptor
        """
        if not await self._desired_lrp_exists(name):
            raise AppNotStartedError(name)

        self._log_operation("Deleting LRP", process_guid=name)

        await self._receptor_client.delete_desired_lrp(name)

    async def is_app_up(self, name: str) -> bool:
        """True if at least one actual instance of ``name`` is RUNNING."""
        actual_lrps = await self._receptor_client.actual_lrps_by_process_guid(name)
        return any(lrp.state == ActualLRPState.RUNNING for lrp in actual_lrps)

    async def app_exists(self, name: str) -> bool:
        """True if a desired LRP named ``name`` exists."""
        return await self._desired_lrp_exists(name)

    async def _desired_lrp_exists(self, name: str) -> bool:
        desired_lrps = await self._receptor_client.desired_lrps()
        return any(lrp.process_guid == name for lrp in desired_lrps)

    def _build_create_request(
        self,
        name: str,
        docker_image_path: str,
        start_command: str,
        app_args: list[str],
        environment_variables: dict[str, str],
        privileged: bool,
        memory_mb: int,
        disk_mb: int,
        port: int,
    ) -> DesiredLRPCreateRequest:
        env = [
            EnvironmentVariable(name=key, value=value)
            for key, value in environment_variables.items()
        ]
        env.append(EnvironmentVariable(name="PORT", value=str(port)))

        return DesiredLRPCreateRequest(
            process_guid=name,
            domain=LRP_DOMAIN,
            root_fs=docker_image_path,
            instances=1,
            stack=STACK,
            env=env,
            routes=[self.route(name)],
            memory_mb=memory_mb,
            disk_mb=disk_mb,
            ports=[port],
            log_guid=name,
            log_source=APP_LOG_SOURCE,
            setup=DownloadAction(from_=CIRCUS_TARBALL_URL, to=CIRCUS_DESTINATION),
            action=RunAction(path=start_command, args=list(app_args), privileged=privileged),
            monitor=RunAction(
                path=HEALTH_CHECK_PATH,
                args=["-addr", f":{port}"],
                log_source=HEALTH_LOG_SOURCE,
            ),
        )

    def _log_operation(self, operation: str, **context) -> None:
        logger.info(operation, service=self.__class__.__name__, **context)
