"""
HTTP adapter tests (FastAPI TestClient).
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


def _ctx():
    return {
        "teams": {
            "U": {"needs": ["RB"], "surpluses": ["WR"], "competitiveWindow": "MIDDLE"},
            "P": {"needs": ["WR"], "surpluses": ["RB"], "competitiveWindow": "MIDDLE"},
        },
        "market": {"scarcityByPosition": {"RB": 1.3}, "pickInflationIndex": 1.0},
        "partnerFit": {"P": {"teamId": "P", "fitScore": 60}},
    }


def _priced():
    return {
        "U": [{"assetId": "u_wr", "name": "U WR", "value": 3000, "position": "WR", "tier": "Tier3_Starter", "isStarter": True}],
        "P": [{"assetId": "p_rb", "name": "P RB", "value": 2900, "position": "RB", "tier": "Tier3_Starter", "isStarter": True}],
    }


class TestTradeFinderRoute:
    def test_candidates_and_meta(self, client):
        res = client.post(
            "/api/trade-finder",
            json={"userTeamId": "U", "leagueDecisionContext": _ctx(), "pricedAssets": _priced()},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["ok"] is True
        assert body["partnersEvaluated"] == 1
        assert [c["tradeId"] for c in body["candidates"]] == ["swap_U_P_RB_WR"]
        assert body["candidates"][0]["valueDeltaPct"] == -3
        assert body["meta"]["scarcityNotes"] == ["RB scarce (+30%)"]
        assert body["meta"]["hasOpportunities"] is True
        assert "message" not in body["meta"]

    def test_message_when_nothing_found(self, client):
        ctx = _ctx()
        ctx["partnerFit"]["P"]["fitScore"] = 10
        res = client.post(
            "/api/trade-finder",
            json={"userTeamId": "U", "leagueDecisionContext": ctx, "pricedAssets": _priced()},
        )
        body = res.json()
        assert body["candidates"] == []
        assert body["opportunities"][-1]["type"] == "MONITOR"
        assert body["meta"]["message"] == "No clean market wins today. Best options are below."

    def test_invalid_objective(self, client):
        res = client.post(
            "/api/trade-finder",
            json={"userTeamId": "U", "leagueDecisionContext": _ctx(), "objective": "YOLO"},
        )
        assert res.status_code == 400
        body = res.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "INVALID_OBJECTIVE"

    def test_malformed_asset(self, client):
        priced = {"U": [{"value": 10}]}
        res = client.post(
            "/api/trade-finder",
            json={"userTeamId": "U", "leagueDecisionContext": _ctx(), "pricedAssets": priced},
        )
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "INVALID_INPUT"


class TestMatchmakingRoute:
    def _intel(self):
        return {
            "managerProfiles": {
                "U": {"displayName": "Me", "needs": ["RB"], "surplus": ["WR"]},
                "P": {"displayName": "Them", "needs": ["WR"], "surplus": ["RB"], "tradeAggression": "medium"},
            }
        }

    def test_ranked_partners(self, client):
        res = client.post(
            "/api/trade-finder/matchmaking",
            json={"userTeamId": "U", "goal": "rb_depth", "leagueIntelligence": self._intel(), "pricedAssets": _priced()},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["ok"] is True
        assert body["goal"] == "rb_depth"
        assert [p["teamId"] for p in body["partners"]] == ["P"]

    def test_invalid_goal(self, client):
        res = client.post(
            "/api/trade-finder/matchmaking",
            json={"userTeamId": "U", "goal": "dynasty", "leagueIntelligence": self._intel()},
        )
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "INVALID_GOAL"

    def test_target_required(self, client):
        res = client.post(
            "/api/trade-finder/matchmaking",
            json={"userTeamId": "U", "goal": "target_player", "leagueIntelligence": self._intel()},
        )
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "TARGET_REQUIRED"


class TestAllowedAssetsRoute:
    def test_allow_lists(self, client):
        res = client.post(
            "/api/trade-finder/allowed-assets",
            json={
                "userTeamId": "U",
                "partnerTeamId": "P",
                "leagueDecisionContext": _ctx(),
                "pricedAssets": _priced(),
                "currentYear": 2026,
            },
        )
        assert res.status_code == 200
        body = res.json()
        assert body["ok"] is True
        assert body["redLineIds"] == ["u_wr"]
        assert body["partnerAssetsAllowed"] == []

    def test_unknown_partner(self, client):
        res = client.post(
            "/api/trade-finder/allowed-assets",
            json={
                "userTeamId": "U",
                "partnerTeamId": "ZZ",
                "leagueDecisionContext": _ctx(),
                "currentYear": 2026,
            },
        )
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "INVALID_INPUT"

    def test_current_year_required(self, client):
        res = client.post(
            "/api/trade-finder/allowed-assets",
            json={"userTeamId": "U", "partnerTeamId": "P", "leagueDecisionContext": _ctx()},
        )
        assert res.status_code == 422
