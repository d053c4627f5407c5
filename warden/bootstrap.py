"""Bootstrap module for wiring a Warden stack from configuration.

Creates stores, the identity provider, the audit recorder and the account
services for one client session. The default configuration gives a fully
in-memory stack, suitable for tests and local development.

Example usage:

    from warden.bootstrap import bootstrap

    services = bootstrap()

    await services.registration.register({...})
    await services.sign_in.sign_in("ada@mail.org", "S3cure!pass")
    view = await services.profile.load()
"""

from dataclasses import dataclass

from prometheus_client import start_http_server

from warden.accounts.coordinator import ProfileMutationCoordinator
from warden.accounts.login import SignedInHook, SignedOutHook, SignInService
from warden.accounts.registration import RegistrationService
from warden.audit.recorder import AuditRecorder
from warden.audit.store import AuditStore
from warden.audit.stores.inmemory import InMemoryAuditStore
from warden.audit.stores.postgres import PostgresAuditStore
from warden.config import get_settings
from warden.config.settings import Settings
from warden.db.pool import PostgresPool
from warden.identity.provider import IdentityProvider
from warden.identity.providers.gotrue import GoTrueIdentityProvider
from warden.identity.providers.inmemory import InMemoryIdentityProvider
from warden.identity.session import SessionContext
from warden.observability.logging import get_logger, setup_logging
from warden.profile.provisioning import profile_provisioner
from warden.profile.store import ProfileStore
from warden.profile.stores.inmemory import InMemoryProfileStore
from warden.profile.stores.postgres import PostgresProfileStore

logger = get_logger(__name__)


@dataclass
class AccountServices:
    """Everything one client needs, sharing a single session context."""

    settings: Settings
    provider: IdentityProvider
    profile_store: ProfileStore
    audit_store: AuditStore
    recorder: AuditRecorder
    session: SessionContext
    registration: RegistrationService
    sign_in: SignInService
    profile: ProfileMutationCoordinator
    pool: PostgresPool | None = None

    async def aclose(self) -> None:
        """Release the database pool and HTTP client, if any."""
        if self.pool is not None:
            await self.pool.close()
        if isinstance(self.provider, GoTrueIdentityProvider):
            await self.provider.aclose()


def create_stores(
    settings: Settings,
) -> tuple[ProfileStore, AuditStore, PostgresPool | None]:
    """Create the profile and audit stores for the configured backend."""
    storage = settings.storage
    if storage.backend == "postgres":
        pg = storage.postgres
        pool = PostgresPool(
            dsn=pg.dsn,
            min_size=pg.min_pool_size,
            max_size=pg.max_pool_size,
            max_inactive_connection_lifetime=pg.max_inactive_connection_lifetime,
            command_timeout=pg.command_timeout,
        )
        return PostgresProfileStore(pool), PostgresAuditStore(pool), pool

    return (
        InMemoryProfileStore(),
        InMemoryAuditStore(client_address=storage.inmemory_client_address),
        None,
    )


def create_identity_provider(
    settings: Settings, profile_store: ProfileStore
) -> IdentityProvider:
    """Create the configured identity provider.

    The in-memory provider provisions profiles itself; a real backend
    does so with its own trigger.
    """
    identity = settings.identity
    if identity.backend == "gotrue":
        if not identity.url:
            raise ValueError("identity.url must be set for the gotrue backend")
        return GoTrueIdentityProvider(
            url=identity.url,
            api_key=identity.api_key,
            timeout=identity.timeout,
        )

    return InMemoryIdentityProvider(on_user_created=profile_provisioner(profile_store))


def bootstrap(
    settings: Settings | None = None,
    *,
    configure_logging: bool = True,
    serve_metrics: bool = False,
    on_signed_in: SignedInHook | None = None,
    on_signed_out: SignedOutHook | None = None,
) -> AccountServices:
    """Build the account services.

    Args:
        settings: Settings to use; defaults to get_settings(), which layers
            config/default.toml, config/{WARDEN_ENV}.toml and WARDEN_* env vars
        configure_logging: Whether to apply the configured logging setup
        serve_metrics: Start the Prometheus HTTP endpoint when metrics are enabled
        on_signed_in: Navigation hook run after a recorded successful sign-in
        on_signed_out: Navigation hook run after sign-out
    """
    settings = settings or get_settings()
    if configure_logging:
        log = settings.observability.logging
        setup_logging(level=log.level, format=log.format, redact_pii=log.redact_pii)

    metrics = settings.observability.metrics
    if serve_metrics and metrics.enabled:
        start_http_server(metrics.port)
        logger.info("metrics_server_started", port=metrics.port)

    profile_store, audit_store, pool = create_stores(settings)
    provider = create_identity_provider(settings, profile_store)
    recorder = AuditRecorder(audit_store)
    session = SessionContext(provider)
    policy = settings.accounts

    services = AccountServices(
        settings=settings,
        provider=provider,
        profile_store=profile_store,
        audit_store=audit_store,
        recorder=recorder,
        session=session,
        registration=RegistrationService(provider, policy=policy),
        sign_in=SignInService(
            provider,
            recorder,
            session,
            policy=policy,
            on_signed_in=on_signed_in,
            on_signed_out=on_signed_out,
        ),
        profile=ProfileMutationCoordinator(
            session, profile_store, audit_store, recorder, policy=policy
        ),
        pool=pool,
    )
    logger.info(
        "warden_bootstrapped",
        storage_backend=settings.storage.backend,
        identity_backend=settings.identity.backend,
    )
    return services
