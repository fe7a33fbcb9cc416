"""Tests for kegg:// resource resolution."""

from unittest.mock import Mock

import pytest

from kegg_tool.errors import InvalidAddress, RemoteCallFailure
from kegg_tool.resources import RESOURCE_PATTERNS, ResourceResolver


@pytest.fixture
def gateway():
    return Mock()


@pytest.fixture
def resolver(gateway):
    return ResourceResolver(gateway)


class TestResourceResolver:
    """Test cases for ResourceResolver."""

    def test_templates(self, resolver):
        templates = resolver.templates()

        assert len(templates) == len(RESOURCE_PATTERNS) == 8
        assert templates[0] == {
            'uriTemplate': 'kegg://pathway/{pathway_id}',
            'name': 'KEGG pathway information',
            'mimeType': 'application/json',
            'description': 'Complete pathway information including genes, compounds, and reactions',
        }
        assert {t['uriTemplate'] for t in templates} >= {
            'kegg://gene/{org}:{gene_id}',
            'kegg://organism/{org_code}',
            'kegg://search/{database}/{query}',
        }

    def test_pathway(self, resolver, gateway):
        gateway.fetch_text.return_value = "ENTRY       hsa00010                    Pathway\n///\n"

        contents = resolver.resolve('kegg://pathway/hsa00010')

        gateway.fetch_text.assert_called_once_with('/get/hsa00010')
        assert contents.uri == 'kegg://pathway/hsa00010'
        assert contents.data == {'entry': 'hsa00010', 'type': 'Pathway'}
        assert contents.mime_type == 'application/json'

    def test_gene_keeps_organism_prefix(self, resolver, gateway):
        gateway.fetch_text.return_value = "ENTRY       1956              CDS       T01001\n///\n"

        resolver.resolve('kegg://gene/hsa:1956')

        gateway.fetch_text.assert_called_once_with('/get/hsa:1956')

    def test_organism_uses_genome_entry(self, resolver, gateway):
        gateway.fetch_text.return_value = "ENTRY       T01001            Complete  Genome\n///\n"

        contents = resolver.resolve('kegg://organism/hsa')

        gateway.fetch_text.assert_called_once_with('/get/gn:hsa')
        assert contents.data['entry'] == 'T01001'

    @pytest.mark.parametrize('uri,path', [
        ('kegg://compound/C00031', '/get/C00031'),
        ('kegg://reaction/R00010', '/get/R00010'),
        ('kegg://disease/H00004', '/get/H00004'),
        ('kegg://drug/D00564', '/get/D00564'),
    ])
    def test_entry_resources(self, resolver, gateway, uri, path):
        gateway.fetch_text.return_value = ""

        assert resolver.resolve(uri).data == {}
        gateway.fetch_text.assert_called_once_with(path)

    def test_search(self, resolver, gateway):
        gateway.fetch_text.return_value = "cpd:C00031\tD-Glucose\n"

        contents = resolver.resolve('kegg://search/compound/d-glucose%206-phosphate')

        gateway.fetch_text.assert_called_once_with('/find/compound/d-glucose%206-phosphate')
        assert contents.data == {
            'search_results': {'cpd:C00031': 'D-Glucose'},
            'query': 'd-glucose 6-phosphate',
            'database': 'compound',
        }

    @pytest.mark.parametrize('uri', [
        'kegg://unknown/x',
        'kegg://pathway/',
        'kegg://search/compound',
        'http://rest.kegg.jp/get/C00031',
        '',
    ])
    def test_invalid_uri(self, resolver, gateway, uri):
        with pytest.raises(InvalidAddress, match="Invalid URI format"):
            resolver.resolve(uri)

        gateway.fetch_text.assert_not_called()

    def test_entry_failure_wrapped(self, resolver, gateway):
        gateway.fetch_text.side_effect = RemoteCallFailure(
            "Request failed with status code 404", endpoint='/get/C99999', status_code=404
        )

        with pytest.raises(RemoteCallFailure) as exc_info:
            resolver.resolve('kegg://compound/C99999')

        assert str(exc_info.value) == "Failed to fetch compound C99999: Request failed with status code 404"
        assert exc_info.value.status_code == 404

    def test_search_failure_wrapped(self, resolver, gateway):
        gateway.fetch_text.side_effect = RemoteCallFailure("Request timed out after 30.0s")

        with pytest.raises(RemoteCallFailure, match="Failed to search drug for aspirin"):
            resolver.resolve('kegg://search/drug/aspirin')
