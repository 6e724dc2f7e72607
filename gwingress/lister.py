"""Turning ingress backends into concrete probe targets on gateway pods."""

from __future__ import annotations

import logging
from dataclasses import replace

from .models import (
    Backends,
    Endpoints,
    Gateway,
    GatewayConfig,
    GatewayPluginConfig,
    HTTPOption,
    IngressVisibility,
    NotFoundError,
    ObjectStore,
    ProbeTarget,
    ProbeURL,
)

_log = logging.getLogger(__name__)

# Istio names the http port "http2", Contour "http-80".
_HTTP_SCHEMES = frozenset({"http", "http2", "http-80"})
_HTTPS_SCHEMES = frozenset({"https", "https-443"})


def _with_scheme(urls: set[ProbeURL], scheme: str) -> list[ProbeURL]:
    return [replace(url, scheme=scheme) for url in sorted(urls, key=str)]


class GatewayPodTargetLister:
    """Lists the pods (or Gateway addresses) that should be probed."""

    def __init__(
        self,
        endpoints_lister: ObjectStore[Endpoints] | None,
        gateway_lister: ObjectStore[Gateway] | None,
    ) -> None:
        self.endpoints_lister = endpoints_lister
        self.gateway_lister = gateway_lister

    def backends_to_probe_targets(
        self, plugin_config: GatewayPluginConfig, backends: Backends
    ) -> list[ProbeTarget]:
        """Map every visibility's URLs onto the gateway that serves it."""
        found_targets = 0
        targets: list[ProbeTarget] = []

        for visibility, urls in backends.urls.items():
            if visibility == IngressVisibility.CLUSTER_LOCAL:
                gateway = plugin_config.local_gateway()
            else:
                gateway = plugin_config.external_gateway()

            if gateway.service is not None:
                new_targets = self._service_targets(gateway, visibility, urls)
            else:
                new_targets = self._gateway_targets(gateway, visibility, urls, backends)

            for target in new_targets:
                found_targets += len(target.pod_ips)
                targets.append(target)

        if found_targets == 0:
            raise LookupError("no gateway pods available")
        return targets

    def _service_targets(
        self, gateway: GatewayConfig, visibility: IngressVisibility, urls: set[ProbeURL]
    ) -> list[ProbeTarget]:
        service = gateway.service
        try:
            eps = self.endpoints_lister.get(service.namespace, service.name)
        except NotFoundError as err:
            raise LookupError(f"failed to get endpoints: {err}") from err

        if visibility == IngressVisibility.EXTERNAL_IP:
            scheme, match_schemes = "https", _HTTPS_SCHEMES
        else:
            scheme, match_schemes = "http", _HTTP_SCHEMES

        targets = []
        for subset in eps.subsets:
            port_number = subset.ports[0].port
            for port in subset.ports:
                if port.name in match_schemes:
                    # An exact name match wins.
                    port_number = port.port
                    break
                if port.app_protocol is not None and port.app_protocol in match_schemes:
                    port_number = port.port

            target = ProbeTarget(
                pod_ips=set(subset.addresses),
                pod_port=str(port_number),
                urls=_with_scheme(urls, scheme),
            )
            if target.urls:
                targets.append(target)
        return targets

    def _gateway_targets(
        self,
        gateway: GatewayConfig,
        visibility: IngressVisibility,
        urls: set[ProbeURL],
        backends: Backends,
    ) -> list[ProbeTarget]:
        try:
            gw = self.gateway_lister.get(gateway.namespace, gateway.name)
        except NotFoundError as err:
            raise LookupError(
                f'Gateway "{gateway.namespaced_name}" does not exist: {err}'
            ) from err

        # Only listener ports 80 and 443 are supported without a Gateway service.
        scheme, pod_port = "http", "80"
        if (
            visibility == IngressVisibility.EXTERNAL_IP
            and backends.http_option == HTTPOption.REDIRECTED
        ):
            scheme, pod_port = "https", "443"

        if not gw.addresses:
            raise LookupError(
                f"no addresses available in status of Gateway {gw.namespace}/{gw.name}"
            )

        target = ProbeTarget(
            pod_ips={gw.addresses[0].value},
            pod_port=pod_port,
            urls=_with_scheme(urls, scheme),
        )
        return [target] if target.urls else []


def new_probe_target_lister(
    endpoints_lister: ObjectStore[Endpoints] | None,
    gateway_lister: ObjectStore[Gateway] | None,
) -> GatewayPodTargetLister:
    """Build a probe target lister over the given stores."""
    return GatewayPodTargetLister(endpoints_lister, gateway_lister)