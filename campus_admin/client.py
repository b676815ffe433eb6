"""AdminClient: wires config, session, transport, cache and resources together."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Literal

import httpx
import structlog

from .assignment import AssignmentController
from .auth import AuthAPI
from .cache import QueryCache
from .config import ClientConfig
from .http import APIClient
from .queries import Mutation, PaginatedQuery
from .resources import RESOURCE_CLASSES, ModuleCourseRelations, ResourceRegistry, TenantPolicy
from .session import FileSessionStore, MemorySessionStore, SessionStore

logger = structlog.get_logger()

MutationAction = Literal["create", "update", "delete", "soft_delete"]

# resources whose cached lists embed rows of another resource
RELATED_RESOURCES: dict[str, tuple[str, ...]] = {
    "module_course": ("courses", "modules"),
}


class AdminClient:
    """Entry point for scripts and UIs talking to the administration API.

    Usage::

        async with AdminClient() as admin:
            await admin.auth.login("me@school.test", "secret")
            async with admin.query("levels", {"specialization_id": 3}) as levels:
                await levels.load()
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session_store: SessionStore | None = None,
        on_unauthorized: Callable[[str], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        if session_store is None:
            if self.config.session_path:
                session_store = FileSessionStore(self.config.session_path)
            else:
                session_store = MemorySessionStore()
        self.sessions = session_store

        self.http = APIClient(
            self.config.api,
            self.sessions,
            on_unauthorized=on_unauthorized,
            transport=transport,
        )
        self.cache = QueryCache()
        self.tenant = TenantPolicy(self.sessions, self.config.default_tenant_id)
        self.auth = AuthAPI(self.http, self.sessions)

        self.resources = ResourceRegistry()
        for resource_cls in RESOURCE_CLASSES:
            self.resources.register(resource_cls(self.http, self.tenant))

    async def start(self) -> None:
        await self.http.start()

    async def stop(self) -> None:
        await self.http.stop()
        self.cache.clear()

    async def __aenter__(self) -> AdminClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Queries and mutations
    # ------------------------------------------------------------------

    def query(self, name: str, params: Mapping[str, Any] | None = None) -> PaginatedQuery[Any]:
        """A paginated list query for resource *name*, starting on page 1."""
        resource = self.resources[name]
        initial = {"page": 1, "limit": self.config.default_page_size, **(params or {})}
        return PaginatedQuery(self.cache, name, resource.list, initial)

    def mutation(self, name: str, action: MutationAction) -> Mutation[Any]:
        resource = self.resources[name]
        return Mutation(
            self.cache,
            (name, *RELATED_RESOURCES.get(name, ())),
            getattr(resource, action),
        )

    # ------------------------------------------------------------------
    # Assignment screens
    # ------------------------------------------------------------------

    def _relations(self, side: Literal["module", "course"]) -> ModuleCourseRelations:
        children = self.resources["courses" if side == "module" else "modules"]
        return ModuleCourseRelations(
            self.resources["module_course"],  # type: ignore[arg-type]
            children,
            side=side,
            page_size=self.config.relation_page_size,
        )

    async def course_assignments(self, module_id: int) -> AssignmentController:
        """Loaded controller for the courses of *module_id*.

        Newly assigned courses inherit the module's volume and coefficient.
        """
        module = await self.resources["modules"].get(module_id)
        defaults = {
            "volume": getattr(module, "volume", None),
            "coefficient": getattr(module, "coefficient", None),
        }
        controller = AssignmentController(
            module_id, self._relations("module"), self.cache, defaults=defaults
        )
        await controller.load()
        return controller

    async def module_assignments(self, course_id: int) -> AssignmentController:
        """Loaded controller for the modules containing *course_id*."""
        controller = AssignmentController(course_id, self._relations("course"), self.cache)
        await controller.load()
        return controller
