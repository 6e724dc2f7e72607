# gwingress

Helpers for serving a networking Ingress through Gateway API gateways. The
package works on plain in-memory resource models. It does not talk to a
cluster.

## What it does

- **Probe target discovery** (`gwingress.lister`).
  `GatewayPodTargetLister.backends_to_probe_targets(plugin_config, backends)`
  takes the URLs of an Ingress, grouped by `IngressVisibility`, and turns them
  into `ProbeTarget`s. Each target holds pod IPs, a port and the URLs to probe.
  - **Gateway with a backing Service.** The targets come from the Service's
    `Endpoints`, one target per subset that has URLs.
    - Cluster-local visibility probes with `http`. It prefers a port named
      `http`, `http2` or `http-80`.
    - External visibility probes with `https`. It prefers a port named `https`
      or `https-443`.
    - A port whose `app_protocol` matches is used when no name matches.
    - If neither matches, the subset's first port is used.
  - **Gateway without a Service.** The first status address of the `Gateway`
    is probed on port 80 with `http`. For external visibility with
    `HTTPOption.REDIRECTED`, it is probed on port 443 with `https` instead.
  - **Errors.** If no pod IPs are found at all, a `LookupError` is raised with
    the message `no gateway pods available`. A missing `Endpoints` or
    `Gateway`, or a Gateway with no addresses, also raises `LookupError`.
- **Load balancer status** (`gwingress.ingress`).
  - `is_http_route_ready(route)` is true when every parent status of an
    `HTTPRoute` has an `Accepted` condition that is `True`.
  - `is_gateway_admitted(parent_status)` checks a single parent.
  - `Reconciler.look_up_load_balancers(ing, plugin_config)` returns the
    external and internal `LoadBalancerIngressStatus` lists.
    - A gateway with a Service yields the Service's cluster hostname as
      `domain_internal`.
    - Otherwise the Gateway's first address is used: as `ip` when it is an IP
      address, and as `domain_internal` otherwise.
  - `Reconciler.update_load_balancer_status(ing, plugin_config, routes_ready)`
    records the result on `ing.status`.
    - A missing Gateway marks the load balancer failed with reason
      `GatewayDoesNotExist`, and nothing is raised.
    - Any other lookup failure marks the load balancer not ready and
      re-raises the error.
- **Models** (`gwingress.models`).
  - Dataclasses for `Endpoints`, `Gateway`, `HTTPRoute`, `Ingress` and related
    objects.
  - `IngressStatus`, which keeps its `Ready` condition in step with the
    `NetworkConfigured` and `LoadBalancerReady` conditions.
  - `ObjectStore`, a namespaced lookup that raises `NotFoundError` for unknown
    names.
  - `get_service_hostname(name, namespace)`, which returns
    `<name>.<namespace>.svc.cluster.local`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from gwingress.models import (
    Backends, EndpointPort, EndpointSubset, Endpoints, GatewayConfig,
    GatewayPluginConfig, IngressVisibility, NamespacedName, ObjectStore, ProbeURL,
)
from gwingress.lister import new_probe_target_lister

gateway = NamespacedName(namespace="istio-system", name="istio-gateway")
config = GatewayPluginConfig(
    external_gateways=[GatewayConfig(namespaced_name=gateway, service=gateway)],
    local_gateways=[GatewayConfig(namespaced_name=gateway, service=gateway)],
)

endpoints = ObjectStore("endpoints")
endpoints.add(Endpoints(
    namespace="istio-system",
    name="istio-gateway",
    subsets=[EndpointSubset(
        ports=[EndpointPort(name="https", port=8443)],
        addresses=["1.2.3.4"],
    )],
))

lister = new_probe_target_lister(endpoints, ObjectStore("gateway"))
targets = lister.backends_to_probe_targets(
    config,
    Backends(urls={IngressVisibility.EXTERNAL_IP: {ProbeURL(host="example.com", path="/")}}),
)
# targets[0].pod_ips == {"1.2.3.4"}, pod_port == "8443", URLs use "https"
```

## What it does not do

The package does not create or update HTTPRoutes, Gateway listeners or
ReferenceGrants. It does not run probes. It does not watch a cluster or run
as a controller, and it provides no command-line tool. Callers supply the
resources through `ObjectStore`s and act on the results themselves.