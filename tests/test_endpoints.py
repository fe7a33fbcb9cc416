"""Tests for KEGG REST path builders."""

from kegg_tool import endpoints


def test_find_path_encodes_query():
    """Test that queries are encoded as a single path segment."""
    assert endpoints.find_path('compound', 'D-glucose 6-phosphate') == '/find/compound/D-glucose%206-phosphate'
    assert endpoints.find_path('pathway', 'a/b') == '/find/pathway/a%2Fb'
    assert endpoints.find_path('compound', "(S)-malate*") == "/find/compound/(S)-malate*"


def test_find_path_option():
    assert endpoints.find_path('compound', 'C7H10O5', 'formula') == '/find/compound/C7H10O5/formula'
    assert endpoints.find_path('compound', '174.05', 'exact_mass') == '/find/compound/174.05/exact_mass'


def test_get_path():
    assert endpoints.get_path('hsa:1956') == '/get/hsa:1956'
    assert endpoints.get_path('hsa00010', 'kgml') == '/get/hsa00010/kgml'


def test_link_conv_ddi_paths():
    assert endpoints.link_path('ko', 'hsa:1956') == '/link/ko/hsa:1956'
    assert endpoints.conv_path('ncbi-geneid', 'hsa:1956+hsa:7157') == '/conv/ncbi-geneid/hsa:1956+hsa:7157'
    assert endpoints.ddi_path(['D00564', 'D00100']) == '/ddi/D00564+D00100'


def test_info_and_list_paths():
    assert endpoints.info_path('pathway') == '/info/pathway'
    assert endpoints.list_path('organism') == '/list/organism'
