from __future__ import annotations

from hrmon.delivery.endpoint import EndpointConfig


def test_defaults_point_at_local_collector():
    ep = EndpointConfig()
    assert ep.base_url == "http://localhost:8080/IoT-Application/rest/v1"


def test_url_for_embeds_reading_in_path():
    ep = EndpointConfig(host="10.0.0.5", port=8081, base_path="rest")
    assert ep.url_for(90) == "http://10.0.0.5:8081/rest/saveHeartRate/90"


def test_empty_base_path():
    ep = EndpointConfig(base_path="/")
    assert ep.url_for(1) == "http://localhost:8080/saveHeartRate/1"


def test_custom_template():
    ep = EndpointConfig(path_template="/hr/{reading}/save")
    assert ep.url_for(42).endswith("/IoT-Application/rest/v1/hr/42/save")
