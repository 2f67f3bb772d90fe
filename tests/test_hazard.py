"""Tests for the CanSHM client and the staged hazard resolver."""

from __future__ import annotations

import copy
import json
import math
from unittest.mock import patch

import pytest
import responses
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import HTTPError

from nbc_loads.config import CANSHM_GRAPHQL_URL
from nbc_loads.data.locations import FALLBACK_HAZARD, GENERIC_HAZARD, MAJOR_CITIES
from nbc_loads.fetchers.canshm import HazardServiceError, fetch_by_site_class, fetch_by_vs30
from nbc_loads.hazard import (
    resolve_hazard,
    resolve_hazard_by_vs30,
    resolve_nearest,
    seismic_zone,
    select_reference_record,
    site_class_from_vs30,
    vs30_from_site_class,
)
from nbc_loads.models import GROUND_MOTION_FIELDS, HazardQuery, HazardRecord, Resolved


def _variables(call_index: int) -> dict:
    return json.loads(responses.calls[call_index].request.body)["variables"]


def _fail_both_stages() -> None:
    responses.add(responses.POST, CANSHM_GRAPHQL_URL, status=503)
    responses.add(responses.POST, CANSHM_GRAPHQL_URL, status=503)


def _resolved(return_period: int) -> Resolved:
    record = HazardRecord(
        location="x", latitude=0.0, longitude=0.0,
        ground_motion=dict(GENERIC_HAZARD), return_period=return_period,
        site_class="C", vs30=560.0,
    )
    return Resolved(record, provenance="remote", strategy="site-class")


class TestFetchBySiteClass:
    @responses.activate
    def test_returns_point_and_designations(self, site_class_payload):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        point, designations = fetch_by_site_class(45.4215, -75.6972, "C", [2.0])
        assert point["metadata"]["zones"] == ["CAN", "ECC"]
        assert len(designations) == 1
        assert _variables(0) == {
            "latitude": 45.4215, "longitude": -75.6972, "siteClass": "C", "poe50": [2.0],
        }

    @responses.activate
    def test_http_500_raises(self):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, status=500)
        with pytest.raises(HTTPError):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])

    @responses.activate
    def test_graphql_errors_raise(self):
        responses.add(
            responses.POST, CANSHM_GRAPHQL_URL,
            json={"errors": [{"message": "Point outside model"}], "data": None},
        )
        with pytest.raises(HazardServiceError, match="Point outside model"):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])

    @responses.activate
    def test_missing_nbc2020_raises(self):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json={"data": {"NBC2020": None}})
        with pytest.raises(HazardServiceError):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])

    @responses.activate
    def test_empty_designations_raise(self, site_class_payload):
        site_class_payload["data"]["NBC2020"]["siteDesignationsXs"] = []
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        with pytest.raises(HazardServiceError):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])


    @responses.activate
    def test_non_object_payload_raises(self):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=["unexpected"])
        with pytest.raises(HazardServiceError, match="JSON object"):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])

    @responses.activate
    def test_non_object_designation_raises(self, site_class_payload):
        site_class_payload["data"]["NBC2020"]["siteDesignationsXs"] = [None]
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        with pytest.raises(HazardServiceError, match="Malformed"):
            fetch_by_site_class(45.0, -75.0, "C", [2.0])


class TestFetchByVs30:
    @responses.activate
    def test_sends_vs30_variable(self, vs30_payload):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=vs30_payload)
        _, designations = fetch_by_vs30(45.4215, -75.6972, 560.0, [2.0])
        assert designations[0]["vs30"] == [560.0]
        variables = _variables(0)
        assert variables["vs30"] == 560.0
        assert "siteClass" not in variables


class TestSiteClassMapping:
    @pytest.mark.parametrize(
        "site_class,vs30",
        [("A", 1500.0), ("B", 1100.0), ("C", 560.0), ("D", 270.0), ("E", 135.0)],
    )
    def test_representative_vs30(self, site_class, vs30):
        assert vs30_from_site_class(site_class) == vs30

    def test_unknown_class_defaults_to_760(self):
        assert vs30_from_site_class("X") == 760.0

    @pytest.mark.parametrize(
        "vs30,expected",
        [(2000, "A"), (1500, "A"), (760, "B"), (560, "C"), (360, "C"), (270, "D"), (100, "E")],
    )
    def test_site_class_from_vs30(self, vs30, expected):
        assert site_class_from_vs30(vs30) == expected

    def test_representative_vs30_maps_back(self):
        for site_class in "ABCDE":
            assert site_class_from_vs30(vs30_from_site_class(site_class)) == site_class


class TestSeismicZone:
    @pytest.mark.parametrize(
        "sa,zone",
        [(1.12, "Very High"), (0.55, "High"), (0.2, "Moderate"), (0.1, "Low"), (0.01, "Very Low")],
    )
    def test_bands(self, sa, zone):
        assert seismic_zone(sa) == zone


class TestResolveHazard:
    @responses.activate
    def test_site_class_success(self, site_class_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        resolved = resolve_hazard(HazardQuery(45.4215, -75.6972, "C"), config=config)

        assert len(responses.calls) == 1
        assert len(resolved) == 1
        r = resolved[0]
        assert r.provenance == "remote"
        assert r.strategy == "site-class"
        assert not r.is_approximate
        assert r.record.sa_0p2 == pytest.approx(0.404)
        assert r.record.return_period == 2475
        assert r.record.vs30 == 560.0
        assert r.record.zones == ("CAN", "ECC")
        assert r.record.location == "45.4215, -75.6972"

    @responses.activate
    def test_missing_fields_default_to_zero(self, site_class_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        record = resolve_hazard(HazardQuery(45.4215, -75.6972), config=config)[0].record
        assert record.ground_motion["5.0s"] == 0.0
        assert record.ground_motion["10.0s"] == 0.0
        assert set(record.ground_motion) == set(GROUND_MOTION_FIELDS)

    @responses.activate
    def test_poe50_sent_in_percent(self, site_class_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        resolve_hazard(HazardQuery(45.0, -75.0, "C", (2475.0, 475.0)), config=config)
        poe50 = _variables(0)["poe50"]
        assert poe50[0] == pytest.approx(2.0, abs=1e-3)
        assert poe50[1] == pytest.approx(10.0, abs=0.01)

    @responses.activate
    def test_one_record_per_designation(self, multi_period_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=multi_period_payload)
        resolved = resolve_hazard(
            HazardQuery(45.0, -75.0, "C", (475.0, 975.0, 2475.0)), config=config
        )
        assert [r.record.return_period for r in resolved] == [475, 975, 2475]

    @responses.activate
    def test_vs30_stage_after_site_class_failure(self, vs30_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, status=500)
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=vs30_payload)

        # Toronto coordinates: a fallback anchor exists but must not be used
        with patch("nbc_loads.hazard.find_within_tolerance") as anchor_lookup:
            resolved = resolve_hazard(HazardQuery(43.6532, -79.3832, "C"), config=config)

        anchor_lookup.assert_not_called()
        assert len(responses.calls) == 2
        assert _variables(1)["vs30"] == 560.0
        r = resolved[0]
        assert r.provenance == "remote"
        assert r.strategy == "vs30"
        assert r.record.sa_0p2 == pytest.approx(0.512)
        assert r.record.soil_velocity_profile == (560.0,)
        assert r.record.location == "43.6532, -79.3832"

    @responses.activate
    def test_graphql_errors_fall_through(self, vs30_payload, config):
        responses.add(
            responses.POST, CANSHM_GRAPHQL_URL,
            json={"errors": [{"message": "Invalid siteClass"}]},
        )
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=vs30_payload)
        resolved = resolve_hazard(HazardQuery(45.0, -75.0, "C"), config=config)
        assert resolved[0].strategy == "vs30"

    @responses.activate
    def test_site_class_d_uses_270(self, vs30_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, status=500)
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=vs30_payload)
        resolve_hazard(HazardQuery(45.0, -75.0, "D"), config=config)
        assert _variables(0)["siteClass"] == "D"
        assert _variables(1)["vs30"] == 270.0

    @responses.activate
    def test_fallback_nearest_near_toronto(self, config):
        _fail_both_stages()
        resolved = resolve_hazard(HazardQuery(43.70, -79.40, "D"), config=config)

        assert len(responses.calls) == 2
        assert len(resolved) == 1
        r = resolved[0]
        assert r.provenance == "fallback-nearest"
        assert r.strategy is None
        assert r.is_approximate
        assert r.record.location == "Toronto, ON"
        assert r.record.sa_0p2 == pytest.approx(0.55)
        assert r.record.sa_1p0 == pytest.approx(0.12)
        assert r.record.return_period == 2475
        assert r.record.site_class == "D"
        assert r.record.vs30 == 270.0

    @responses.activate
    def test_generic_fallback_far_from_anchors(self, config):
        _fail_both_stages()
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)

        r = resolved[0]
        assert r.provenance == "fallback-generic"
        assert r.record.location == "0.0000, 0.0000"
        assert r.record.ground_motion == GENERIC_HAZARD
        assert all(math.isfinite(v) for v in r.record.ground_motion.values())

    @responses.activate
    def test_connection_error_falls_back(self, config):
        responses.add(
            responses.POST, CANSHM_GRAPHQL_URL, body=RequestsConnectionError("offline")
        )
        resolved = resolve_hazard(HazardQuery(49.28, -123.12), config=config)
        assert resolved[0].provenance == "fallback-nearest"
        assert resolved[0].record.location == "Vancouver, BC"

    @responses.activate
    def test_malformed_json_falls_back(self, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, body="<html>maintenance</html>")
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_null_body_falls_back(self, config):
        responses.add(
            responses.POST, CANSHM_GRAPHQL_URL, body="null", content_type="application/json"
        )
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_array_body_falls_back(self, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=[])
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_string_body_falls_back(self, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json="service unavailable")
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_null_designation_falls_back(self, site_class_payload, config):
        site_class_payload["data"]["NBC2020"]["siteDesignationsXs"] = [None]
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_non_object_data_falls_back(self, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json={"data": ["NBC2020"]})
        resolved = resolve_hazard(HazardQuery(0.0, 0.0), config=config)
        assert resolved[0].provenance == "fallback-generic"

    @responses.activate
    def test_long_return_period_survives_service_echo(self, site_class_payload, config):
        def echo_poe50(request):
            poe50 = json.loads(request.body)["variables"]["poe50"]
            payload = copy.deepcopy(site_class_payload)
            designation = payload["data"]["NBC2020"]["siteDesignationsXs"][0]
            payload["data"]["NBC2020"]["siteDesignationsXs"] = [
                dict(designation, poe50=p) for p in poe50
            ]
            return 200, {}, json.dumps(payload)

        responses.add_callback(
            responses.POST, CANSHM_GRAPHQL_URL, callback=echo_poe50,
            content_type="application/json",
        )
        resolved = resolve_hazard(HazardQuery(0.0, 0.0, "C", (10000.0,)), config=config)
        assert resolved[0].provenance == "remote"
        assert resolved[0].record.return_period == 10000
        assert select_reference_record(resolved, 10000).record.return_period == 10000

    @responses.activate
    def test_single_zone_string(self, site_class_payload, config):
        site_class_payload["data"]["NBC2020"]["metadata"]["zones"] = "CAN"
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        record = resolve_hazard(HazardQuery(45.0, -75.0), config=config)[0].record
        assert record.zones == ("CAN",)

    @responses.activate
    def test_fallback_tolerance_from_config(self, config):
        _fail_both_stages()
        wide = config.model_copy(update={"fallback_tolerance_deg": 1.0})
        resolved = resolve_hazard(HazardQuery(44.2, -79.4), config=wide)
        assert resolved[0].record.location == "Toronto, ON"

    @responses.activate
    def test_posts_to_configured_url(self, site_class_payload, config):
        url = "https://hazard.example.test/graphql"
        responses.add(responses.POST, url, json=site_class_payload)
        custom = config.model_copy(update={"hazard_api_url": url})
        resolved = resolve_hazard(HazardQuery(45.0, -75.0), config=custom)
        assert resolved[0].provenance == "remote"


class TestResolveHazardByVs30:
    @responses.activate
    def test_maps_vs30_to_site_class(self, site_class_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=site_class_payload)
        resolve_hazard_by_vs30(45.0, -75.0, vs30=300.0, config=config)
        assert _variables(0)["siteClass"] == "D"


class TestSelectReferenceRecord:
    def test_exact_match_wins(self):
        records = [_resolved(475), _resolved(2475), _resolved(975)]
        assert select_reference_record(records).record.return_period == 2475

    def test_closest_when_no_exact_match(self):
        records = [_resolved(475), _resolved(975)]
        assert select_reference_record(records).record.return_period == 975

    def test_custom_reference(self):
        records = [_resolved(475), _resolved(2475)]
        assert select_reference_record(records, reference=500).record.return_period == 475

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            select_reference_record([])


class TestResolveNearest:
    @responses.activate
    def test_remote_record_closest_to_return_period(self, multi_period_payload, config):
        responses.add(responses.POST, CANSHM_GRAPHQL_URL, json=multi_period_payload)
        r = resolve_nearest(45.0, -75.0, return_period=2475.0, config=config)
        assert r.provenance == "remote"
        assert r.record.return_period == 2475
        assert r.record.sa_0p2 == pytest.approx(0.404)

    @responses.activate
    def test_nearest_city_regardless_of_distance(self, config):
        _fail_both_stages()
        # ~0.8 deg from Ottawa: outside the tolerance, still the nearest anchor
        r = resolve_nearest(45.0, -75.0, site_class="E", config=config)
        assert r.provenance == "fallback-nearest"
        assert r.record.location == "Ottawa, ON"
        assert r.record.site_class == "C"
        assert r.record.vs30 == 760.0
        assert r.record.ground_motion == FALLBACK_HAZARD["Ottawa, ON"]

    @responses.activate
    def test_far_point_still_gets_a_city(self, config):
        _fail_both_stages()
        r = resolve_nearest(0.0, 0.0, config=config)
        assert r.provenance == "fallback-nearest"
        assert r.record.location in FALLBACK_HAZARD


class TestHazardRecord:
    def test_ground_motion_is_copied(self):
        motions = dict(GENERIC_HAZARD)
        record = HazardRecord(
            location="x", latitude=0.0, longitude=0.0, ground_motion=motions,
            return_period=2475, site_class="C", vs30=560.0,
        )
        motions["0.2s"] = 9.9
        assert record.sa_0p2 == GENERIC_HAZARD["0.2s"]

    @responses.activate
    def test_fallback_does_not_share_table(self, config):
        _fail_both_stages()
        record = resolve_hazard(HazardQuery(43.70, -79.40), config=config)[0].record
        assert record.ground_motion == FALLBACK_HAZARD["Toronto, ON"]
        assert record.ground_motion is not FALLBACK_HAZARD["Toronto, ON"]


class TestFallbackData:
    def test_anchors_are_catalog_cities(self):
        names = {city.name for city in MAJOR_CITIES}
        assert set(FALLBACK_HAZARD) <= names

    def test_fallback_records_are_complete(self):
        for motions in FALLBACK_HAZARD.values():
            assert set(motions) == set(GROUND_MOTION_FIELDS)
        assert set(GENERIC_HAZARD) == set(GROUND_MOTION_FIELDS)
