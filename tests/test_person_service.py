"""
Test cases for the person service
"""

import pytest

from conftest import SAMPLE_BILL, SAMPLE_PERSON
from congress_api.lib.errors import NotFoundError
from congress_api.services.person_service import MEMBERSHIPS, PersonService


class TestPersonService:
    @pytest.fixture
    def service(self, graph):
        return PersonService(graph)

    @pytest.mark.asyncio
    async def test_list_defaults_to_last_name(self, service, graph):
        graph.respond_page(1, [SAMPLE_PERSON])

        result = await service.list_people()

        count, data = graph.statements
        assert "WHERE" not in count.text
        assert "ORDER BY p.last_name ASC, p.first_name ASC, p.id ASC" in data.text
        assert result.data == [SAMPLE_PERSON]
        assert result.pagination.has_more is False

    @pytest.mark.asyncio
    async def test_type_and_congress_use_one_membership(self, service, graph):
        graph.respond_page(0, [])

        await service.list_people(type="Senator", congress="19")

        count = graph.statements[0]
        assert count.text.count("EXISTS {") == 1
        assert count.params == {"chamber": "senate", "congress_number": 19}

    @pytest.mark.asyncio
    async def test_unknown_type_is_ignored(self, service, graph):
        graph.respond_page(0, [])

        await service.list_people(type="governor")

        assert graph.statements[0].params == {}

    @pytest.mark.asyncio
    async def test_search_matches_names_and_aliases(self, service, graph):
        graph.respond_page(1, [SAMPLE_PERSON])

        await service.list_people(search=" reyes ", sort="first_name", dir="desc")

        count, data = graph.statements
        assert "ANY(alias IN p.aliases WHERE toLower(alias) CONTAINS toLower($search))" in count.text
        assert count.params == {"search": "reyes"}
        assert "ORDER BY p.first_name DESC" in data.text

    @pytest.mark.asyncio
    async def test_search_endpoint_accepts_all_congresses(self, service, graph):
        graph.respond_page(1, [SAMPLE_PERSON])

        await service.search_people("maria", congress="all")

        assert graph.statements[0].params == {"q": "maria"}

    @pytest.mark.asyncio
    async def test_search_endpoint_congress_by_id(self, service, graph):
        graph.respond_page(1, [SAMPLE_PERSON])

        await service.search_people("maria", type="representative", congress="congress-20")

        assert graph.statements[0].params == {"q": "maria", "chamber": "house", "congress_id": "congress-20"}

    @pytest.mark.asyncio
    async def test_detail(self, service, graph):
        graph.respond("LIMIT 1", [SAMPLE_PERSON])

        person = await service.get_person("person-reyes")

        assert person == SAMPLE_PERSON
        assert "congresses_served" not in graph.last.text

    @pytest.mark.asyncio
    async def test_detail_with_congresses(self, service, graph):
        history = [{"congress_number": 20, "position": "senator"}, {"congress_number": 19, "position": "representative"}]
        graph.respond("LIMIT 1", [dict(SAMPLE_PERSON, congresses_served=history)])

        person = await service.get_person("person-reyes", include_congresses=True)

        assert "(p)-[hm:MEMBER_OF]->(g:Group)-[:BELONGS_TO]->(hc:Congress)" in graph.last.text
        assert person["congresses_served"] == history

    @pytest.mark.asyncio
    async def test_detail_not_found(self, service):
        with pytest.raises(NotFoundError, match="Person with id 'nobody' not found"):
            await service.get_person("nobody")

    @pytest.mark.asyncio
    async def test_memberships(self, service, graph):
        graph.respond(MEMBERSHIPS, [{"congress_number": 19, "position": "representative", "type": "member"}])

        rows = await service.list_memberships("person-reyes")

        assert rows == [{"congress_number": 19, "position": "representative", "type": "member"}]
        assert len(graph.statements) == 1

    @pytest.mark.asyncio
    async def test_memberships_of_unknown_person(self, service, graph):
        with pytest.raises(NotFoundError):
            await service.list_memberships("nobody")

    @pytest.mark.asyncio
    async def test_memberships_empty_for_known_person(self, service, graph):
        graph.respond("RETURN p.id AS id LIMIT 1", [{"id": "person-santos"}])

        assert await service.list_memberships("person-santos") == []

    @pytest.mark.asyncio
    async def test_groups(self, service, graph):
        graph.respond("MEMBER_OF", [{"id": "chamber-20-senate", "type": "chamber", "subtype": "senate"}])

        groups = await service.list_groups("person-reyes", type="chamber")

        assert groups[0]["subtype"] == "senate"
        assert graph.last.params == {"id": "person-reyes", "type": "chamber"}

    @pytest.mark.asyncio
    async def test_authored_documents(self, service, graph):
        graph.respond_page(1, [SAMPLE_BILL])

        result = await service.list_documents("person-reyes", congress="19", type="hb")

        count = graph.statements[0]
        assert "MATCH (author:Person)-[:AUTHORED]->(d:Document)" in count.text
        assert count.params == {"person_id": "person-reyes", "congress": 19, "type": "HB"}
        assert result.data[0]["name"] == "HB00001"
