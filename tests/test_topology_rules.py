import dataclasses

import pytest

from app.config import Settings
from app.models.topology import DeviceType, SplitterType
from app.services.topology.calculator import build_stages
from app.services.topology.rules import (
    TopologyRules,
    build_rules,
    calculate_cumulative_loss,
    can_add_passive_element,
    get_max_subscribers,
    get_splitter_loss,
    rules_snapshot,
)


def test_splitter_losses_grow_with_fanout(rules):
    losses = [rules.loss_for(splitter) for splitter in SplitterType]
    assert losses == sorted(losses)
    assert rules.loss_for(SplitterType.split_1x16) == 13
    assert rules.loss_for(SplitterType.split_1x4) == 7


def test_tube_system_constants(rules):
    assert rules.tube_primary == SplitterType.split_1x16
    assert rules.tube_secondary == SplitterType.split_1x4
    assert rules.tube_secondary_count == 4
    assert rules.tube_capacity == 64
    assert rules.tube_loss_db == rules.max_passive_loss_db == 20


def test_rules_table_is_read_only(rules):
    with pytest.raises(TypeError):
        rules.splitter_losses_db[SplitterType.split_1x2] = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        rules.max_passive_loss_db = 30


def test_get_splitter_loss_accepts_codes_and_ignores_unknown(rules):
    assert get_splitter_loss("1X16", rules) == 13
    assert get_splitter_loss(SplitterType.split_1x32, rules) == 17
    assert get_splitter_loss("1x3", rules) == 0


def test_can_add_passive_element_respects_ceiling(rules):
    assert can_add_passive_element(13, 7, rules) is True
    assert can_add_passive_element(13, 10, rules) is False


def test_cumulative_loss_and_max_subscribers(rules):
    stages = build_stages([SplitterType.split_1x16, SplitterType.split_1x4], rules)
    assert calculate_cumulative_loss(stages) == 20
    assert get_max_subscribers(stages) == 64
    assert get_max_subscribers(()) == 0


def test_device_port_inference_table(rules):
    assert rules.ports_for(DeviceType.olt, "GPON") == 16
    assert rules.ports_for(DeviceType.olt, "epon") == 8
    assert rules.ports_for(DeviceType.ms, "1x32") == 32
    assert rules.ports_for(DeviceType.subms, "1x4") == 4
    assert rules.ports_for(DeviceType.subms, "1x32") is None
    assert rules.ports_for(DeviceType.fdb, "1x8") is None
    assert rules.ports_for(DeviceType.ms, None) is None


def test_build_rules_rejects_ceiling_below_tube_loss():
    with pytest.raises(ValueError, match="Tube system loss"):
        build_rules(Settings(topology_max_passive_loss_db=15))


def test_build_rules_rejects_threshold_above_tube_capacity():
    with pytest.raises(ValueError, match="threshold"):
        build_rules(Settings(topology_direct_subscriber_threshold=100))


def test_build_rules_uses_settings():
    rules = build_rules(Settings(topology_max_passive_loss_db=25, topology_top_olt=2))
    assert rules.max_passive_loss_db == 25
    assert rules.top_olt == 2


def test_rules_snapshot_is_plain_data():
    snapshot = rules_snapshot(TopologyRules())
    assert snapshot["splitter_losses_db"]["1x64"] == 20
    assert snapshot["splitter_ports"]["1x8"] == 8
    assert snapshot["pon_capacity"] == {"epon": 64, "gpon": 128, "xgpon": 256, "xgspon": 256}
    assert snapshot["device_ports"]["ms"]["1x16"] == 16
    assert snapshot["tube_system"] == {
        "primary": "1x16",
        "secondary": "1x4",
        "secondary_count": 4,
        "capacity": 64,
        "total_loss_db": 20,
    }
