"""Tests for DomainScoringService."""

import pytest

from models.ski_data import SkiData
from services.domain_scoring_service import (
    DomainScoringService,
    max_avalanche_risk,
)
from services.normalisation_service import normalise_ski_data


@pytest.fixture
def service():
    return DomainScoringService()


@pytest.fixture
def snapshot(raw_payload):
    return SkiData.model_validate(normalise_ski_data(raw_payload))


class TestScoreDomain:
    def test_brevent_scenario(self, service, snapshot, sample_weather):
        """Two of three lifts, three open difficulties, calm soft snow at -5°C."""
        score = service.score_domain(
            "BREVENT",
            snapshot.lifts["BREVENT"],
            snapshot.pistes["BREVENT"],
            sample_weather[1],
        )
        # 8 lifts + 8 half ratio + 6 pistes + 10 variety
        # + 15 wind + 5 soft + 5 base + 5 temp
        assert score.score == 62
        assert score.lifts_open == 2
        assert score.lifts_total == 3
        assert score.name == "Brévent"
        assert score.reasons == ["great variety of runs", "calm winds", "soft snow"]

    def test_fresh_snow_day(self, service, make_lift, make_station):
        """Six of eight lifts, calm wind, 25cm of fresh snow."""
        lifts = [make_lift(f"Lift {i}", status="O" if i < 6 else "F") for i in range(8)]
        station = make_station(
            wind_speed_kmh=15.0, snow_quality="FRAICHE", last_snowfall_cm=25.0
        )
        score = service.score_domain("BREVENT", lifts, [], station)

        assert score.score >= 69
        assert "most lifts running" in score.reasons
        assert "calm winds" in score.reasons
        assert "25cm fresh snow" in score.reasons

    def test_small_area_penalty_floors_at_zero(self, service, snapshot, sample_weather):
        score = service.score_domain(
            "LES HOUCHES",
            snapshot.lifts["LES HOUCHES"],
            snapshot.pistes["LES HOUCHES"],
            sample_weather[2],
        )
        assert score.lifts_open == 1
        assert score.score == 0

    def test_most_lifts_running(self, service, make_lift):
        lifts = [make_lift(f"Lift {i}") for i in range(4)]
        score = service.score_domain("FLEGERE", lifts, [], None)
        # 16 + 15
        assert score.score == 31
        assert score.reasons == ["most lifts running"]

    def test_no_weather_scores_lifts_and_pistes_only(self, service, make_lift, make_piste):
        lifts = [make_lift("A"), make_lift("B"), make_lift("C", status="F"), make_lift("D", status="F")]
        pistes = [make_piste("Blue"), make_piste("Red", difficulty="R", status="F")]
        score = service.score_domain("POYA", lifts, pistes, None)
        # 8 + 8 half ratio + 2
        assert score.score == 18
        assert score.weather is None

    def test_deep_fresh_snow_reason(self, service, make_lift, make_station):
        lifts = [make_lift("A"), make_lift("B")]
        station = make_station(
            snow_quality="FRAICHE",
            last_snowfall_cm=25.0,
            wind_speed_kmh=45.0,
            snow_depth_cm=80.0,
            temp_morning_c=-12.0,
        )
        score = service.score_domain("BREVENT", lifts, [], station)
        # 8 + 15 most lifts + 5 wind band + 10 fresh + 5 deep fresh
        assert score.score == 43
        assert "25cm fresh snow" in score.reasons
        assert "calm winds" not in score.reasons

    def test_shallow_fresh_snow_reason(self, service, make_lift, make_station):
        station = make_station(snow_quality="FRAICHE", last_snowfall_cm=8.0)
        score = service.score_domain("BREVENT", [make_lift("A"), make_lift("B")], [], station)
        assert "fresh snow" in score.reasons

    def test_strong_wind_penalty(self, service, make_lift, make_station):
        lifts = [make_lift("A"), make_lift("B")]
        calm = service.score_domain("BREVENT", lifts, [], make_station(wind_speed_kmh=10.0))
        gale = service.score_domain("BREVENT", lifts, [], make_station(wind_speed_kmh=70.0))
        assert calm.score - gale.score == 25

    def test_missing_readings_count_as_zero(self, service, make_lift):
        from models.ski_data import WeatherStation

        station = WeatherStation(location_name="Brévent", elevation_m=2525)
        score = service.score_domain("BREVENT", [make_lift("A"), make_lift("B")], [], station)
        # 8 + 15 most lifts + 15 calm wind, temp 0 outside the ideal range
        assert score.score == 38


class TestRankDomains:
    def test_ranks_best_first(self, service, snapshot):
        ranking = service.rank_domains(snapshot.lifts, snapshot.pistes, snapshot.weather)
        assert [s.sector for s in ranking] == ["BREVENT", "LES HOUCHES"]

    def test_excludes_sectors_without_open_lifts(self, service, make_lift):
        lifts = {
            "POYA": [make_lift("Poya", status="F", sector="POYA")],
            "PLANARDS": [make_lift("Planards", sector="PLANARDS")],
        }
        ranking = service.rank_domains(lifts, {}, [])
        assert [s.sector for s in ranking] == ["PLANARDS"]

    def test_ties_keep_input_order(self, service, make_lift):
        lifts = {
            "PLANARDS": [make_lift("A", sector="PLANARDS"), make_lift("B", sector="PLANARDS")],
            "POYA": [make_lift("C", sector="POYA"), make_lift("D", sector="POYA")],
        }
        ranking = service.rank_domains(lifts, {}, [])
        assert ranking[0].score == ranking[1].score
        assert [s.sector for s in ranking] == ["PLANARDS", "POYA"]


class TestRecommend:
    def test_pick_and_alternatives(self, service, snapshot):
        rec = service.recommend(snapshot.lifts, snapshot.pistes, snapshot.weather)
        assert rec.pick.sector == "BREVENT"
        assert [s.sector for s in rec.alternatives] == ["LES HOUCHES"]
        assert rec.highlight == "top_rated"
        assert not rec.limited_skiing

    def test_avalanche_advice(self, service, snapshot):
        rec = service.recommend(snapshot.lifts, snapshot.pistes, snapshot.weather)
        assert rec.max_avalanche_risk == 3
        assert rec.avalanche_advice == "Exercise caution off-piste"

    def test_high_avalanche_advice(self, service, make_lift, make_station):
        lifts = {"BREVENT": [make_lift("A"), make_lift("B")]}
        rec = service.recommend(lifts, {}, [make_station(avalanche_risk=4)])
        assert rec.avalanche_advice == "Stay on marked pistes - high avalanche risk"

    def test_fresh_snow_highlight(self, service, make_lift, make_station):
        lifts = {"BREVENT": [make_lift("A"), make_lift("B")]}
        rec = service.recommend(lifts, {}, [make_station(snow_quality="FRAICHE")])
        assert rec.highlight == "fresh_snow"

    def test_single_open_lift_still_ranked(self, service, make_lift):
        lifts = {
            "POYA": [make_lift("Poya", sector="POYA")],
            "PLANARDS": [make_lift("Planards", status="F", sector="PLANARDS")],
        }
        rec = service.recommend(lifts, {}, [])
        assert [s.sector for s in rec.ranking] == ["POYA"]
        assert rec.pick.score == 0

    def test_limited_skiing(self, service, make_lift):
        lifts = {"BREVENT": [make_lift("A", status="F")]}
        rec = service.recommend(lifts, {}, [])
        assert rec.limited_skiing
        assert rec.pick is None
        assert rec.highlight is None
        assert rec.max_avalanche_risk == 0
        assert rec.avalanche_advice is None

    def test_alternatives_capped_at_two(self, service, make_lift):
        lifts = {
            sector: [make_lift("A", sector=sector), make_lift("B", sector=sector)]
            for sector in ("PLANARDS", "POYA", "LA VORMAINE", "LES CHOSALETS")
        }
        rec = service.recommend(lifts, {}, [])
        assert len(rec.ranking) == 4
        assert len(rec.alternatives) == 2

    def test_to_dict(self, service, snapshot):
        result = service.recommend(snapshot.lifts, snapshot.pistes, snapshot.weather).to_dict()
        assert result["pick"]["name"] == "Brévent"
        assert result["pick"]["weather"]["location_name"] == "Brévent"
        assert result["alternatives"][0]["weather"]["location_name"] == "Les Houches"


class TestSummarizeSectors:
    def test_sorted_by_open_lifts(self, service, snapshot):
        summaries = service.summarize_sectors(snapshot.lifts, snapshot.pistes, snapshot.weather)
        assert [s.sector for s in summaries] == ["BREVENT", "LES HOUCHES"]
        assert summaries[0].status == "amber"
        assert summaries[0].pistes_by_difficulty["red"] == {"open": 1, "total": 1}

    def test_sector_without_lifts_is_red(self, service):
        summaries = service.summarize_sectors({"POYA": []}, {}, [])
        assert summaries[0].status == "red"
        assert summaries[0].weather is None

    def test_lists_lifts_with_type_labels(self, service, snapshot):
        summaries = service.summarize_sectors(snapshot.lifts, snapshot.pistes, snapshot.weather)
        lifts = summaries[0].to_dict()["lifts"]
        assert lifts == [
            {"lift_name": "Télécabine de Planpraz", "status": "O", "type_label": "Gondola"},
            {"lift_name": "Téléphérique du Brévent", "status": "O", "type_label": "Cable car"},
            {"lift_name": "Télésiège de Parsa", "status": "F", "type_label": "Detachable chairlift"},
        ]

    def test_unknown_lift_type_has_no_label(self, service, make_lift):
        lift = make_lift("Fil neige", lift_type="FIL")
        summary = service.summarize_sectors({"POYA": [lift]}, {}, [])[0]
        assert summary.to_dict()["lifts"][0]["type_label"] is None


class TestMaxAvalancheRisk:
    def test_empty(self):
        assert max_avalanche_risk([]) == 0

    def test_ignores_missing(self, make_station):
        stations = [make_station(avalanche_risk=None), make_station(avalanche_risk=2)]
        assert max_avalanche_risk(stations) == 2
