"""Routing of records, mutations and queries to a tenant schema.

Tenant tables are mapped without a schema. A construct stamped with a
namespace is executed with ``schema_translate_map={None: namespace}``, so
SQLAlchemy qualifies every unqualified table with the tenant schema.
``TenantSession`` applies the same translation per record at flush time.

Stamping is pure: ``put_tenant`` returns a new object and never touches the
database or the object it was given.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from sqlalchemy import Select, event, inspect, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.horizontal_shard import ShardedSession
from sqlalchemy.orm import InstanceState, ORMExecuteState, Session
from sqlalchemy.orm.exc import DetachedInstanceError

from tenancy.ports.exceptions import TenantRoutingError
from tenancy.ports.qualifiable import NamespaceQualifiable

_Q = TypeVar("_Q", bound=NamespaceQualifiable)
_R = TypeVar("_R", bound="TenantScoped")


def resolve_tenant(tenant: Any, field: str = "id") -> str:
    """Extract the tenant name from a string, a mapping or an object.

    Mappings are read by key and other objects by attribute, both using
    ``field``.

    Raises:
        TypeError: If no string identifier can be found
    """
    if isinstance(tenant, str):
        return tenant
    if isinstance(tenant, Mapping):
        value = tenant.get(field)
    else:
        value = getattr(tenant, field, None)
    if not isinstance(value, str):
        raise TypeError(
            f"Cannot resolve a tenant from {type(tenant).__name__}: "
            f"{field!r} must be a string, got {type(value).__name__}"
        )
    return value


def namespace_execution_options(namespace: str | None) -> dict[str, Any]:
    """Execution options routing unqualified tables to ``namespace``."""
    if namespace is None:
        return {}
    return {"schema_translate_map": {None: namespace}}


def put_tenant(target: _Q, tenant: Any, field: str = "id") -> _Q:
    """Return a copy of ``target`` routed to the tenant's schema.

    Args:
        target: A record, mutation or query implementing NamespaceQualifiable
        tenant: Tenant name, or a mapping/object carrying it under ``field``
        field: Key or attribute holding the name when tenant is not a string

    Raises:
        TypeError: If target cannot carry a namespace or tenant has no name
    """
    if not isinstance(target, NamespaceQualifiable):
        raise TypeError(f"{type(target).__name__} cannot carry a tenant namespace")
    return target.with_namespace(resolve_tenant(tenant, field=field))


def tenant_session(engine: Engine, tenant: Any, **kwargs: Any) -> TenantSession:
    """Open an ORM session whose statements run in the tenant's schema.

    Records stamped with another namespace are still written to their own
    schema; see ``TenantSession``.
    """
    return TenantSession(engine, resolve_tenant(tenant), **kwargs)


def _identity_namespace(state: InstanceState[Any]) -> str | None:
    if state.key is not None:
        return state.key[2]
    return state.identity_token


class TenantSession(ShardedSession):
    """Session that writes each record to the schema of its own namespace.

    The namespace plays the role of a shard id. A record stamped through
    ``put_tenant`` is flushed to its stamped schema; an unstamped record and
    every query go to the session's tenant. Loaded records keep the schema
    they were read from.

    One translated bind is created per namespace and reused, so all writes
    to a namespace share one connection within a transaction. Writes to
    different namespaces use different connections and commit one after
    the other.
    """

    def __init__(self, engine: Engine, tenant: str | None = None, **kwargs: Any):
        self._engine = engine
        self._tenant = tenant
        self._namespace_binds: dict[str, Engine] = {}
        super().__init__(
            shard_chooser=self._choose_namespace,
            identity_chooser=self._namespaces_for_identity,
            execute_chooser=self._namespaces_for_statement,
            **kwargs,
        )

    @property
    def tenant(self) -> str | None:
        return self._tenant

    def bind_for(self, namespace: str) -> Engine:
        """Engine executing with unqualified tables resolved to ``namespace``."""
        bind = self._namespace_binds.get(namespace)
        if bind is None:
            bind = self._engine.execution_options(
                **namespace_execution_options(namespace)
            )
            self._namespace_binds[namespace] = bind
        return bind

    def get_bind(  # type: ignore[override]
        self,
        mapper: Any = None,
        *,
        shard_id: str | None = None,
        instance: Any = None,
        clause: Any = None,
        **kw: Any,
    ) -> Engine:
        if shard_id is None:
            if instance is not None:
                shard_id = self._namespace_of(instance)
            else:
                shard_id = self._require_tenant()
        return self.bind_for(shard_id)

    def connection_callable(  # type: ignore[override]
        self,
        mapper: Any = None,
        instance: Any = None,
        shard_id: str | None = None,
        **kw: Any,
    ) -> Connection:
        if shard_id is None and instance is not None:
            shard_id = self._namespace_of(instance)
        return super().connection_callable(mapper, instance, shard_id=shard_id, **kw)

    def merge(self, instance: Any, *args: Any, **kwargs: Any) -> Any:
        """Merge ``instance`` into the schema it is stamped for."""
        state = inspect(instance)
        namespace = getattr(instance, "_tenant_namespace", None)
        if namespace is not None and state.key is None:
            state.identity_token = namespace
        merged = super().merge(instance, *args, **kwargs)
        merged_state = inspect(merged)
        if namespace is not None and merged_state.key is None:
            merged_state.identity_token = namespace
        return merged

    def _require_tenant(self) -> str:
        if self._tenant is None:
            raise TenantRoutingError(
                "Session has no tenant; stamp the record or open the session "
                "with tenant_session()"
            )
        return self._tenant

    def _choose_namespace(self, mapper: Any, instance: Any, **kw: Any) -> str:
        namespace = getattr(instance, "_tenant_namespace", None)
        return namespace if namespace is not None else self._require_tenant()

    def _namespace_of(self, instance: Any) -> str:
        """Namespace a record belongs to, assigned on first use."""
        state = inspect(instance)
        namespace = _identity_namespace(state)
        if namespace is None:
            namespace = self._choose_namespace(state.mapper, instance)
            state.identity_token = namespace
        return namespace

    def _namespaces_for_identity(
        self, mapper: Any, primary_key: Any, *, lazy_loaded_from: Any = None, **kw: Any
    ) -> list[str]:
        if lazy_loaded_from is not None:
            return [_identity_namespace(lazy_loaded_from)]
        return [self._require_tenant()]

    def _namespaces_for_statement(self, orm_context: ORMExecuteState) -> list[str]:
        if orm_context.is_select and orm_context.lazy_loaded_from is not None:
            return [_identity_namespace(orm_context.lazy_loaded_from)]
        return [self._require_tenant()]


@event.listens_for(Session, "before_flush")
def _refuse_misrouted_records(session: Session, flush_context: Any, instances: Any) -> None:
    """Stop a plain session from writing a stamped record to the wrong schema.

    A plain session has one bind, so a record stamped for any other schema
    than the one that bind translates to would land in the wrong place.
    """
    if isinstance(session, TenantSession):
        return
    for record in [*session.new, *session.dirty]:
        namespace = getattr(record, "_tenant_namespace", None)
        if namespace is None:
            continue
        bind = session.get_bind(mapper=inspect(record).mapper)
        translate_map = bind.get_execution_options().get("schema_translate_map") or {}
        if translate_map.get(None) != namespace:
            raise TenantRoutingError(
                f"{type(record).__name__} is stamped for {namespace!r} but the "
                f"session writes to {translate_map.get(None)!r}; "
                f"use tenant_session() to route it"
            )


def _copy_record(record: _R, namespace: str | None) -> _R:
    """New transient instance with the column values of ``record``.

    Values of a persistent record are read through the instance, so expired
    and deferred columns are loaded first. A transient record only
    contributes the columns that were set, leaving defaults to the insert.

    Raises:
        DetachedInstanceError: If the record is detached and some of its
            columns are unloaded, so their values cannot be read
    """
    state = inspect(record)
    columns = [attr.key for attr in state.mapper.column_attrs]
    unloaded = state.unloaded.intersection(columns)
    if state.detached and unloaded:
        raise DetachedInstanceError(
            f"{type(record).__name__} is detached with unloaded columns "
            f"{sorted(unloaded)}; load them or reattach it before copying"
        )
    clone = state.mapper.class_manager.new_instance()
    for key in columns:
        if state.key is not None or key in state.dict:
            setattr(clone, key, getattr(record, key))
    clone._tenant_namespace = namespace
    return clone


class TenantScoped:
    """Mixin for mapped models whose rows live in tenant schemas.

    ``with_namespace`` returns a new transient instance holding the same
    column values plus the namespace. A ``TenantSession`` writes it to that
    namespace whatever the session's own tenant is.
    """

    _tenant_namespace = None

    @property
    def namespace(self) -> str | None:
        """Stamped namespace, else the schema the record was loaded from."""
        if self._tenant_namespace is not None:
            return self._tenant_namespace
        return _identity_namespace(inspect(self))

    def with_namespace(self: _R, namespace: str) -> _R:
        return _copy_record(self, namespace)

    def session_options(self) -> dict[str, Any]:
        """Execution options for persisting this record."""
        return namespace_execution_options(self.namespace)


@dataclass(frozen=True)
class Mutation:
    """Pending change to a record: the record plus the values to write.

    Attributes:
        data: The record being changed
        changes: Column values to set on ``data`` when applied
    """

    data: TenantScoped
    changes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def change(cls, data: TenantScoped, **changes: Any) -> Mutation:
        """Describe setting ``changes`` on ``data``."""
        return cls(data=data, changes=changes)

    @property
    def namespace(self) -> str | None:
        return self.data.namespace

    def with_namespace(self, namespace: str) -> Mutation:
        return replace(self, data=self.data.with_namespace(namespace))

    def apply(self) -> TenantScoped:
        """Return a copy of the record with the changes set, namespace kept."""
        record = _copy_record(self.data, self.namespace)
        for key, value in self.changes.items():
            setattr(record, key, value)
        return record


@dataclass(frozen=True)
class TenantQuery:
    """A composable SELECT that can be routed to a tenant schema.

    Attributes:
        select: The underlying SQLAlchemy statement
        namespace: Schema its tables resolve to, None for the default
    """

    select: Select[Any]
    namespace: str | None = None

    @classmethod
    def from_(cls, *entities: Any) -> TenantQuery:
        """Start a query over mapped entities or columns."""
        return cls(select=select(*entities))

    def where(self, *criteria: Any) -> TenantQuery:
        return replace(self, select=self.select.where(*criteria))

    def with_namespace(self, namespace: str) -> TenantQuery:
        return replace(self, namespace=namespace)

    def statement(self) -> Select[Any]:
        """The SELECT, carrying the schema translation for its namespace."""
        options = namespace_execution_options(self.namespace)
        if not options:
            return self.select
        return self.select.execution_options(**options)
