"""Tests for product spec extraction and search query construction."""

from price_worker.matching.spec_extractor import build_search_query, extract_product_specs


def test_volume_tokens():
    specs = extract_product_specs("Stanley Quencher Tumbler 40oz").specs
    assert '40oz' in specs


def test_volume_tokens_with_space_and_decimal():
    specs = extract_product_specs("Hydro Flask 1.5 L Bottle").specs
    assert '1.5 L' in specs


def test_storage_tokens():
    specs = extract_product_specs("Samsung Galaxy S24 256GB").specs
    assert specs == ['256GB']


def test_screen_size_in_range_is_kept():
    specs = extract_product_specs('Dell UltraSharp 27 inch Monitor').specs
    assert '27 inch' in specs


def test_screen_size_quoted():
    specs = extract_product_specs('MacBook Pro 16" Laptop').specs
    assert '16"' in specs


def test_out_of_range_numbers_are_dropped():
    specs = extract_product_specs("Calendar 2024 Pack of 3").specs
    assert specs == []


def test_model_numbers_are_not_screen_sizes():
    specs = extract_product_specs("Sony WH-1000XM5 Headphones").specs
    assert specs == []


def test_size_class_tokens():
    specs = extract_product_specs("Patagonia Nano Puff Jacket Large").specs
    assert 'Large' in specs


def test_brand_guess():
    assert extract_product_specs("Sony WH-1000XM5").brand == 'Sony'
    assert extract_product_specs("LG OLED C3 65 inch").brand == ''


def test_clean_name_is_original():
    name = "Sony WH-1000XM5 Headphones"
    assert extract_product_specs(name).clean_name == name


def test_query_keeps_leading_keywords():
    assert build_search_query("Sony WH-1000XM5 Headphones") == "Sony WH-1000XM5 Headphones"


def test_query_limits_keywords_and_appends_specs():
    query = build_search_query("Apple iPhone Pro Max Titanium Natural Unlocked 256GB")
    assert query == "Apple iPhone Pro Max Titanium 256GB"


def test_query_skips_specs_already_in_keywords():
    query = build_search_query("Stanley Quencher Tumbler 40oz")
    assert query == "Stanley Quencher Tumbler 40oz"


def test_query_drops_stop_words_and_punctuation():
    query = build_search_query("Stanley Quencher Tumbler with Handle (40 oz)")
    assert query == "Stanley Quencher Tumbler Handle 40 oz"
