import pytest

from gwingress.models import (
    CONDITION_FALSE,
    CONDITION_TRUE,
    CONDITION_UNKNOWN,
    INGRESS_READY,
    LOAD_BALANCER_READY,
    NETWORK_CONFIGURED,
    Endpoints,
    GatewayConfig,
    GatewayNotFoundError,
    GatewayPluginConfig,
    IngressStatus,
    LoadBalancerIngressStatus,
    NamespacedName,
    NotFoundError,
    ObjectStore,
    ProbeURL,
    get_service_hostname,
)


def test_namespaced_name_str():
    assert str(NamespacedName("istio-system", "istio-gateway")) == "istio-system/istio-gateway"


def test_gateway_not_found_default_message():
    assert str(GatewayNotFoundError()) == "could not find Gateway"


def test_plugin_config_picks_first_gateways():
    ext = GatewayConfig(NamespacedName("a", "ext"))
    loc = GatewayConfig(NamespacedName("a", "loc"), service=NamespacedName("a", "svc"))
    cfg = GatewayPluginConfig(external_gateways=[ext, GatewayConfig(NamespacedName("b", "x"))],
                              local_gateways=[loc])
    assert cfg.external_gateway() is ext
    assert cfg.local_gateway() is loc
    assert cfg.local_gateway().name == "loc"


def test_plugin_config_empty_raises():
    with pytest.raises(ValueError):
        GatewayPluginConfig().external_gateway()


def test_object_store_round_trip():
    ep = Endpoints("istio-system", "istio-gateway")
    store = ObjectStore("endpoints", [ep])
    assert store.get("istio-system", "istio-gateway") is ep
    assert len(store) == 1


def test_object_store_not_found_message():
    store = ObjectStore("endpoints")
    with pytest.raises(NotFoundError) as info:
        store.get("istio-system", "istio-gateway")
    assert str(info.value) == 'endpoints "istio-gateway" not found'
    assert isinstance(info.value, LookupError)


def test_object_store_wrong_namespace():
    store = ObjectStore("endpoints", [Endpoints("ns1", "x")])
    with pytest.raises(NotFoundError):
        store.get("ns2", "x")


def test_service_hostname():
    assert get_service_hostname("istio-gateway", "istio-system") == (
        "istio-gateway.istio-system.svc.cluster.local"
    )


def test_probe_url_str():
    assert str(ProbeURL("https", "example.com", "/")) == "https://example.com/"


def test_initialize_conditions_all_unknown():
    status = IngressStatus()
    status.initialize_conditions()
    for t in (INGRESS_READY, NETWORK_CONFIGURED, LOAD_BALANCER_READY):
        assert status.get_condition(t).status == CONDITION_UNKNOWN
    assert not status.is_ready()


def test_ready_when_all_dependents_true():
    status = IngressStatus()
    status.initialize_conditions()
    status.mark_network_configured()
    assert not status.is_ready()
    lb = [LoadBalancerIngressStatus(ip="11.22.33.44")]
    status.mark_load_balancer_ready(lb, [])
    assert status.is_ready()
    assert status.public_load_balancer == lb
    assert status.private_load_balancer == []


def test_load_balancer_failed_makes_ready_false():
    status = IngressStatus()
    status.initialize_conditions()
    status.mark_network_configured()
    status.mark_load_balancer_failed(
        "GatewayDoesNotExist", "could not find Gateway istio-system/istio-gateway"
    )
    lb = status.get_condition(LOAD_BALANCER_READY)
    assert lb.status == CONDITION_FALSE
    assert lb.reason == "GatewayDoesNotExist"
    ready = status.get_condition(INGRESS_READY)
    assert ready.status == CONDITION_FALSE
    assert ready.message == "could not find Gateway istio-system/istio-gateway"


def test_load_balancer_not_ready_after_ready():
    status = IngressStatus()
    status.initialize_conditions()
    status.mark_network_configured()
    status.mark_load_balancer_ready([], [])
    status.mark_load_balancer_not_ready()
    assert status.get_condition(LOAD_BALANCER_READY).status == CONDITION_UNKNOWN
    assert status.get_condition(INGRESS_READY).status == CONDITION_UNKNOWN
    assert status.get_condition(NETWORK_CONFIGURED).status == CONDITION_TRUE


def test_mark_ingress_not_ready_sets_reason():
    status = IngressStatus()
    status.initialize_conditions()
    status.mark_ingress_not_ready("HTTPRouteNotReady", "Waiting for HTTPRoute becomes Ready.")
    ready = status.get_condition(INGRESS_READY)
    assert ready.status == CONDITION_UNKNOWN
    assert ready.reason == "HTTPRouteNotReady"
    assert ready.message == "Waiting for HTTPRoute becomes Ready."