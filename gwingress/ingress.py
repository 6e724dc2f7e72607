"""Load balancer status for ingresses served through Gateway API resources."""

from __future__ import annotations

from .models import (
    CONDITION_TRUE,
    ROUTE_CONDITION_ACCEPTED,
    AddressType,
    Gateway,
    GatewayConfig,
    GatewayNotFoundError,
    GatewayPluginConfig,
    HTTPRoute,
    Ingress,
    LoadBalancerIngressStatus,
    NotFoundError,
    ObjectStore,
    RouteParentStatus,
    get_service_hostname,
)

NOT_RECONCILED_REASON = "ReconcileIngressFailed"
NOT_RECONCILED_MESSAGE = "Ingress reconciliation failed"


class Reconciler:
    """Works out the load balancer status of an ingress from its Gateways."""

    def __init__(self, gateway_lister: ObjectStore[Gateway] | None = None) -> None:
        self.gateway_lister = gateway_lister

    def look_up_load_balancers(
        self, ing: Ingress, plugin_config: GatewayPluginConfig
    ) -> tuple[list[LoadBalancerIngressStatus], list[LoadBalancerIngressStatus]]:
        """Return the external and internal load balancer statuses."""
        external = self.collect_lb_ingress_status(ing, plugin_config.external_gateway())
        internal = self.collect_lb_ingress_status(ing, plugin_config.local_gateway())
        return external, internal

    def collect_lb_ingress_status(
        self, ing: Ingress, gateway: GatewayConfig
    ) -> list[LoadBalancerIngressStatus]:
        """Return the address of the gateway's Service, or the Gateway's first address."""
        if gateway.service is not None:
            hostname = get_service_hostname(gateway.service.name, gateway.service.namespace)
            return [LoadBalancerIngressStatus(domain_internal=hostname)]

        if self.gateway_lister is None:
            raise LookupError(
                f'failed to get Gateway "{gateway.namespace}/{gateway.name}": no gateway lister'
            )
        try:
            gw = self.gateway_lister.get(gateway.namespace, gateway.name)
        except NotFoundError as err:
            ing.status.mark_load_balancer_failed(
                "GatewayDoesNotExist",
                f"could not find Gateway {gateway.namespace}/{gateway.name}",
            )
            raise GatewayNotFoundError(
                f"error getting Gateway {gateway.namespace}/{gateway.name}: could not find Gateway"
            ) from err

        if not gw.addresses:
            raise LookupError(
                f"no address found in status of Gateway {gateway.namespace}/{gateway.name}"
            )

        first = gw.addresses[0]
        if first.type == AddressType.IP:
            return [LoadBalancerIngressStatus(ip=first.value)]
        return [LoadBalancerIngressStatus(domain_internal=first.value)]

    def update_load_balancer_status(
        self, ing: Ingress, plugin_config: GatewayPluginConfig, routes_ready: bool
    ) -> None:
        """Mark the load balancer ready, not ready or failed on the ingress status.

        A missing Gateway is recorded as a failure and not raised, since
        retrying cannot help; other lookup errors are raised.
        """
        if not routes_ready:
            ing.status.mark_load_balancer_not_ready()
            return
        try:
            external, internal = self.look_up_load_balancers(ing, plugin_config)
        except GatewayNotFoundError:
            return
        except LookupError:
            ing.status.mark_load_balancer_not_ready()
            raise
        ing.status.mark_load_balancer_ready(external, internal)


def is_http_route_ready(route: HTTPRoute) -> bool:
    """True when every parent Gateway has accepted the route."""
    if route.parents is None:
        return False
    return all(is_gateway_admitted(parent) for parent in route.parents)


def is_gateway_admitted(parent_status: RouteParentStatus) -> bool:
    """True when the parent's Accepted condition is True."""
    for condition in parent_status.conditions:
        if condition.type == ROUTE_CONDITION_ACCEPTED:
            return condition.status == CONDITION_TRUE
    return False