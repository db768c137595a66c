from app.models.topology import PonType, SplitterType, TopologyPlan, TopologyType
from app.services.topology.calculator import build_stages
from app.services.topology.recommendations import generate_recommendations, recommend_for_plan
from app.services.topology.validator import validate_topology


def test_direct_recommendations(rules):
    lines = generate_recommendations(8, "gpon", rules)
    assert lines[0] == "Use DIRECT topology - no passive elements needed"
    assert "Connect clients directly to OLT port" in lines
    assert "120 more subscribers can be added before reaching the GPON limit of 128" in lines


def test_tube_recommendations(rules):
    lines = generate_recommendations(24, "gpon", rules)
    assert lines[:3] == [
        "Use TUBE SYSTEM topology: 1x16 -> 4x1x4",
        "Total loss will be 20 dB (13 + 7)",
        "Maximum 64 subscribers supported",
    ]
    assert "No further passive elements allowed after 20 dB" in lines


def test_at_capacity(rules):
    lines = generate_recommendations(64, "epon", rules)
    assert "At EPON capacity limit of 64 subscribers" in lines
    assert not any("saturated" in line for line in lines)


def test_over_capacity_suggests_upgrade_and_more_ports(rules):
    lines = generate_recommendations(65, PonType.epon, rules)
    assert "Consider using multiple OLT ports for 65 subscribers or upgrading to GPON" in lines
    assert "Passive fan-out saturated; split subscribers across 2 OLT PON ports" in lines


def test_no_upgrade_beyond_largest_pon_type(rules):
    lines = generate_recommendations(300, "xgspon", rules)
    assert "Consider using multiple OLT ports for 300 subscribers" in lines


def test_remaining_budget_counts_spare_splitters(rules):
    stages = build_stages([SplitterType.split_1x8], rules)
    plan = TopologyPlan(
        subscriber_count=8,
        pon_type=PonType.gpon,
        topology_type=TopologyType.single_stage,
        stages=stages,
        total_loss_db=10.0,
        capacity_limit=128,
        max_subscribers=8,
    )
    lines = recommend_for_plan(plan, validate_topology(plan, rules), rules)
    assert lines[0] == "Current splitter chain: 1x8 (total loss 10 dB)"
    assert "10 dB of loss budget remains; can add 3 more 1x2 splitter stage(s)" in lines
