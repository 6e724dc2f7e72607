"""Resource models, ingress status bookkeeping and in-memory object stores."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, Iterable, Protocol, TypeVar

CONDITION_TRUE = "True"
CONDITION_FALSE = "False"
CONDITION_UNKNOWN = "Unknown"

INGRESS_READY = "Ready"
NETWORK_CONFIGURED = "NetworkConfigured"
LOAD_BALANCER_READY = "LoadBalancerReady"

ROUTE_CONDITION_ACCEPTED = "Accepted"

_INGRESS_DEPENDENTS = (NETWORK_CONFIGURED, LOAD_BALANCER_READY)

CLUSTER_DOMAIN = "cluster.local"


class NotFoundError(LookupError):
    """A named resource is not present in a store."""

    def __init__(self, resource: str, name: str) -> None:
        super().__init__(f'{resource} "{name}" not found')
        self.resource = resource
        self.name = name


class GatewayNotFoundError(LookupError):
    """The Gateway an ingress relies on could not be found."""

    def __init__(self, message: str = "could not find Gateway") -> None:
        super().__init__(message)


class IngressVisibility(str, enum.Enum):
    EXTERNAL_IP = "ExternalIP"
    CLUSTER_LOCAL = "ClusterLocal"


class HTTPOption(str, enum.Enum):
    ENABLED = "Enabled"
    REDIRECTED = "Redirected"


@dataclass(frozen=True, order=True)
class NamespacedName:
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class GatewayConfig:
    """One configured Gateway, optionally fronted by a Service."""

    namespaced_name: NamespacedName
    service: NamespacedName | None = None

    @property
    def namespace(self) -> str:
        return self.namespaced_name.namespace

    @property
    def name(self) -> str:
        return self.namespaced_name.name


@dataclass
class GatewayPluginConfig:
    external_gateways: list[GatewayConfig] = field(default_factory=list)
    local_gateways: list[GatewayConfig] = field(default_factory=list)

    def external_gateway(self) -> GatewayConfig:
        """Return the Gateway used for external visibility."""
        if not self.external_gateways:
            raise ValueError("no external gateway configured")
        return self.external_gateways[0]

    def local_gateway(self) -> GatewayConfig:
        """Return the Gateway used for cluster-local visibility."""
        if not self.local_gateways:
            raise ValueError("no local gateway configured")
        return self.local_gateways[0]


@dataclass
class EndpointPort:
    name: str
    port: int
    app_protocol: str | None = None


@dataclass
class EndpointSubset:
    addresses: list[str] = field(default_factory=list)
    ports: list[EndpointPort] = field(default_factory=list)


@dataclass
class Endpoints:
    namespace: str
    name: str
    subsets: list[EndpointSubset] = field(default_factory=list)


class AddressType(str, enum.Enum):
    IP = "IPAddress"
    HOSTNAME = "Hostname"
    NAMED = "NamedAddress"


@dataclass
class GatewayStatusAddress:
    value: str
    type: AddressType | None = AddressType.IP


@dataclass
class Gateway:
    namespace: str
    name: str
    addresses: list[GatewayStatusAddress] = field(default_factory=list)


@dataclass
class Condition:
    type: str
    status: str
    reason: str = ""
    message: str = ""


@dataclass
class RouteParentStatus:
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class HTTPRoute:
    namespace: str
    name: str
    parents: list[RouteParentStatus] | None = None


@dataclass
class LoadBalancerIngressStatus:
    ip: str = ""
    domain: str = ""
    domain_internal: str = ""
    mesh_only: bool = False


@dataclass
class IngressStatus:
    """Conditions of an ingress; Ready follows its dependent conditions."""

    conditions: dict[str, Condition] = field(default_factory=dict)
    public_load_balancer: list[LoadBalancerIngressStatus] = field(default_factory=list)
    private_load_balancer: list[LoadBalancerIngressStatus] = field(default_factory=list)

    def initialize_conditions(self) -> None:
        for cond_type in (INGRESS_READY, *_INGRESS_DEPENDENTS):
            self.conditions.setdefault(cond_type, Condition(cond_type, CONDITION_UNKNOWN))

    def get_condition(self, cond_type: str) -> Condition | None:
        return self.conditions.get(cond_type)

    def is_ready(self) -> bool:
        ready = self.conditions.get(INGRESS_READY)
        return ready is not None and ready.status == CONDITION_TRUE

    def _status_of(self, cond_type: str) -> str | None:
        cond = self.conditions.get(cond_type)
        return cond.status if cond else None

    def _set_dependent(self, cond_type: str, status: str, reason: str = "", message: str = "") -> None:
        self.conditions[cond_type] = Condition(cond_type, status, reason, message)
        if all(self._status_of(dep) == CONDITION_TRUE for dep in _INGRESS_DEPENDENTS):
            self.conditions[INGRESS_READY] = Condition(INGRESS_READY, CONDITION_TRUE)
        elif status == CONDITION_FALSE:
            self.conditions[INGRESS_READY] = Condition(INGRESS_READY, CONDITION_FALSE, reason, message)
        elif status == CONDITION_UNKNOWN:
            others_failed = any(
                self._status_of(dep) == CONDITION_FALSE
                for dep in _INGRESS_DEPENDENTS
                if dep != cond_type
            )
            if not others_failed:
                self.conditions[INGRESS_READY] = Condition(
                    INGRESS_READY, CONDITION_UNKNOWN, reason, message
                )

    def mark_network_configured(self) -> None:
        self._set_dependent(NETWORK_CONFIGURED, CONDITION_TRUE)

    def mark_ingress_not_ready(self, reason: str, message: str) -> None:
        self.conditions[INGRESS_READY] = Condition(INGRESS_READY, CONDITION_UNKNOWN, reason, message)

    def mark_load_balancer_ready(
        self,
        external: list[LoadBalancerIngressStatus],
        internal: list[LoadBalancerIngressStatus],
    ) -> None:
        self.public_load_balancer = list(external)
        self.private_load_balancer = list(internal)
        self._set_dependent(LOAD_BALANCER_READY, CONDITION_TRUE)

    def mark_load_balancer_not_ready(self) -> None:
        self._set_dependent(
            LOAD_BALANCER_READY,
            CONDITION_UNKNOWN,
            "Uninitialized",
            "Waiting for load balancer to be ready",
        )

    def mark_load_balancer_failed(self, reason: str, message: str) -> None:
        self._set_dependent(LOAD_BALANCER_READY, CONDITION_FALSE, reason, message)


@dataclass
class Ingress:
    namespace: str
    name: str
    annotations: dict[str, str] = field(default_factory=dict)
    status: IngressStatus = field(default_factory=IngressStatus)


@dataclass(frozen=True, order=True)
class ProbeURL:
    scheme: str = ""
    host: str = ""
    path: str = ""

    def __str__(self) -> str:
        prefix = f"{self.scheme}:" if self.scheme else ""
        return f"{prefix}//{self.host}{self.path}"


@dataclass
class ProbeTarget:
    pod_ips: set[str] = field(default_factory=set)
    pod_port: str = ""
    urls: list[ProbeURL] = field(default_factory=list)


@dataclass
class Backends:
    urls: dict[IngressVisibility, set[ProbeURL]] = field(default_factory=dict)
    http_option: HTTPOption | None = None
    version: str = ""


class _Named(Protocol):
    namespace: str
    name: str


T = TypeVar("T", bound=_Named)


class ObjectStore(Generic[T]):
    """Namespaced lookup of resources of one kind."""

    def __init__(self, resource: str, objects: Iterable[T] = ()) -> None:
        self.resource = resource
        self._objects: dict[NamespacedName, T] = {}
        for obj in objects:
            self.add(obj)

    def add(self, obj: T) -> None:
        self._objects[NamespacedName(obj.namespace, obj.name)] = obj

    def get(self, namespace: str, name: str) -> T:
        try:
            return self._objects[NamespacedName(namespace, name)]
        except KeyError:
            raise NotFoundError(self.resource, name) from None

    def __len__(self) -> int:
        return len(self._objects)


def get_service_hostname(name: str, namespace: str) -> str:
    """Return the fully qualified in-cluster hostname of a Service."""
    return f"{name}.{namespace}.svc.{CLUSTER_DOMAIN}"