"""
Endpoint tests through the FastAPI test client
"""

from conftest import SAMPLE_BILL, SAMPLE_CONGRESS, SAMPLE_PERSON
from congress_api.services.stats_service import BILLS_BY_SUBTYPE


class TestRoot:
    def test_banner(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Open Congress API"


class TestCongressEndpoints:
    def test_list(self, client, graph):
        graph.respond_page(1, [SAMPLE_CONGRESS])

        response = client.get("/api/congresses", params={"year": "2022", "limit": "10"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"][0]["ordinal"] == "19th"
        assert body["pagination"] == {"total": 1, "limit": 10, "offset": 0, "has_more": False}

    def test_invalid_year_is_a_fetch_error(self, client):
        response = client.get("/api/congresses", params={"year": "soon"})

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "FETCH_ERROR"
        assert "year" in response.json()["error"]["message"]

    def test_detail_not_found(self, client):
        response = client.get("/api/congresses/99")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": "Congress with id '99' not found"},
        }

    def test_senators(self, client, graph):
        graph.respond_page(1, [dict(SAMPLE_PERSON, position="senator")])

        response = client.get("/api/congresses/19/senators")

        assert response.json()["data"][0]["position"] == "senator"
        assert graph.statements[0].params["chamber"] == "senate"

    def test_committees(self, client, graph):
        graph.respond_page(0, [])

        response = client.get("/api/congresses/congress-19/committees")

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert graph.statements[0].params == {"congress_id": "congress-19"}


class TestPeopleEndpoints:
    def test_list_paginates(self, client, graph):
        graph.respond_page(45, [SAMPLE_PERSON] * 20)

        response = client.get("/api/people", params={"type": "senator"})

        pagination = response.json()["pagination"]
        assert pagination["has_more"] is True
        assert pagination["next_cursor"] == "20"

    def test_detail_with_congresses(self, client, graph):
        graph.respond("LIMIT 1", [dict(SAMPLE_PERSON, congresses_served=[])])

        response = client.get("/api/people/person-reyes", params={"include_congresses": "true"})

        assert response.json()["data"]["congresses_served"] == []
        assert "congresses_served" in graph.last.text

    def test_documents(self, client, graph):
        graph.respond_page(1, [SAMPLE_BILL])

        response = client.get("/api/people/person-reyes/bills")

        assert response.json()["data"][0]["id"] == "bill-19-hb-1"

    def test_search_requires_q(self, client, graph):
        response = client.get("/api/search/people")

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "FETCH_ERROR"
        assert graph.statements == []


class TestDocumentEndpoints:
    def test_list_alias(self, client, graph):
        graph.respond_page(1, [SAMPLE_BILL])

        documents = client.get("/api/documents", params={"limit": "500"}).json()
        bills = client.get("/api/bills", params={"limit": "100"}).json()

        assert documents == bills
        assert documents["pagination"]["limit"] == 100

    def test_offset_past_the_end(self, client, graph):
        graph.respond_page(3, [])

        response = client.get("/api/documents", params={"offset": "50"})

        assert response.json()["data"] == []
        assert response.json()["pagination"]["has_more"] is False

    def test_detail_by_code_not_found(self, client):
        response = client.get("/api/documents/HB00001")

        assert response.status_code == 404
        assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Bill with id 'HB00001' not found"}

    def test_detail(self, client, graph):
        graph.respond("LIMIT 1", [SAMPLE_BILL])

        response = client.get("/api/bills/HB00001")

        assert response.json()["data"]["authors"][0]["id"] == "person-reyes"

    def test_authors(self, client, graph):
        graph.respond("LIMIT 1", [SAMPLE_PERSON])

        response = client.get("/api/documents/bill-19-hb-1/authors")

        assert response.json() == {"success": True, "data": [SAMPLE_PERSON]}

    def test_search(self, client, graph):
        graph.respond_page(1, [SAMPLE_BILL])

        response = client.get("/api/search/documents", params={"q": "tax", "congress": "19", "scope": "any"})

        assert response.status_code == 200
        assert graph.statements[0].params == {"q": "tax", "congress": 19}

    def test_database_failure_is_a_fetch_error(self, client, graph):
        graph.respond("AS total", RuntimeError("Neo4j unavailable"))

        response = client.get("/api/documents")

        assert response.status_code == 500
        assert response.json()["error"] == {"code": "FETCH_ERROR", "message": "Neo4j unavailable"}


class TestUtilityEndpoints:
    def test_stats(self, client, graph):
        graph.respond(BILLS_BY_SUBTYPE, [{"total_bills": 7, "total_house_bills": 4, "total_senate_bills": 3}])

        data = client.get("/api/stats").json()["data"]

        assert data["total_bills"] == data["total_house_bills"] + data["total_senate_bills"]

    def test_ping(self, client):
        response = client.get("/api/ping")

        assert response.status_code == 200
        assert response.json()["data"]["database"] == {"connected": True}

    def test_ping_unreachable(self, client, graph):
        graph.connectivity_error = OSError("Connection refused")

        response = client.get("/api/ping")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "DB_ERROR"
