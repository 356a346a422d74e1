"""Tests for the price-check cycle using in-memory fakes."""

import dataclasses

import pytest

from conftest import FakeFetcher, FakeNotifier, FakeRepository, sony_search_page
from price_worker.config import HISTORY_ALWAYS, HISTORY_SOURCE
from price_worker.database.models import TrackedProduct, UserSettings
from price_worker.database.repository import RepositoryError
from price_worker.scrapers.page_fetcher import PageScrape
from price_worker.worker.orchestrator import PriceCheckOrchestrator, RunSummary

WEBHOOK = 'https://discord.com/api/webhooks/123/token'


def _orchestrator(settings, repository, fetcher, notifier=None):
    return PriceCheckOrchestrator(repository, fetcher, settings, notifier=notifier)


@pytest.mark.asyncio
async def test_successful_check_updates_price_and_searches_every_store(settings, sony_product):
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))

    ok = await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert ok is True
    assert repository.price_updates == [{
        'id': 'prod-1', 'name': 'Sony WH-1000XM5 Headphones', 'currency': 'USD',
        'current_price': 298.0, 'status': 'tracking',
    }]
    assert len(repository.history) == 1
    assert repository.history[0].price == 298.0
    assert repository.history[0].source == HISTORY_SOURCE

    assert len(fetcher.search_calls) == 5
    for url in fetcher.search_calls:
        assert 'Sony%20WH-1000XM5%20Headphones' in url


@pytest.mark.asyncio
async def test_product_page_uses_site_selectors(settings, sony_product):
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))

    await _orchestrator(settings, FakeRepository(), fetcher).check_product(sony_product)

    url, price_selector, wait_selector = fetcher.product_calls[0]
    assert url == sony_product.url
    assert price_selector.startswith('.a-price .a-offscreen')
    assert wait_selector == '#productTitle, #title'


@pytest.mark.asyncio
async def test_failed_scrape_marks_product_and_skips_comparisons(settings, sony_product):
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=None)
    summary = RunSummary()

    ok = await _orchestrator(settings, repository, fetcher).check_product(sony_product, summary)

    assert ok is False
    assert repository.failed_ids == ['prod-1']
    assert repository.price_updates == []
    assert repository.upsert_calls == []
    assert fetcher.search_calls == []
    assert summary.failed == 1


@pytest.mark.asyncio
async def test_confident_match_is_stored_as_available(settings, sony_product):
    repository = FakeRepository()
    fetcher = FakeFetcher(
        product_page=PageScrape(price=298.0),
        search_results_by_store={'amazon.com': sony_search_page()},
    )

    summary = RunSummary()

    await _orchestrator(settings, repository, fetcher).check_product(sony_product, summary)

    amazon = repository.comparisons[('prod-1', 'Amazon')]
    assert amazon.is_available is True
    assert amazon.price == 310.0
    assert amazon.currency == 'USD'
    assert amazon.store_url.startswith('https://www.amazon.com/s?k=')
    assert repository.comparisons[('prod-1', 'eBay')].is_available is False
    assert (summary.comparisons_matched, summary.comparisons_missed) == (1, 4)


@pytest.mark.asyncio
async def test_no_match_stores_unavailable_row_with_search_link(settings, sony_product):
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))
    summary = RunSummary()

    await _orchestrator(settings, repository, fetcher).check_product(sony_product, summary)

    assert len(repository.comparisons) == 5
    walmart = repository.comparisons[('prod-1', 'Walmart')]
    assert walmart.price is None
    assert walmart.is_available is False
    assert walmart.currency == 'USD'
    assert 'walmart.com/search?q=' in walmart.store_url
    assert summary.comparisons_missed == 5
    assert summary.comparisons_matched == 0


@pytest.mark.asyncio
async def test_unchanged_price_skips_history_by_default(settings, sony_product):
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=348.0))

    await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert repository.history == []
    assert repository.price_updates[0]['current_price'] == 348.0


@pytest.mark.asyncio
async def test_always_policy_records_unchanged_price(settings, sony_product):
    settings = dataclasses.replace(settings, history_policy=HISTORY_ALWAYS)
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=348.0))

    await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert len(repository.history) == 1


@pytest.mark.asyncio
async def test_first_observation_records_history(settings, sony_product):
    sony_product.current_price = None
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=348.0))

    await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert len(repository.history) == 1


@pytest.mark.asyncio
async def test_price_drop_notifies_user_webhook(settings, sony_product):
    repository = FakeRepository(user_settings={'user-1': UserSettings(id='user-1', discord_webhook=WEBHOOK)})
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))
    notifier = FakeNotifier()

    await _orchestrator(settings, repository, fetcher, notifier).check_product(sony_product)

    assert len(notifier.sent) == 1
    webhook, product, old_price, new_price = notifier.sent[0]
    assert webhook == WEBHOOK
    assert (old_price, new_price) == (348.0, 298.0)
    assert product.current_price == 298.0


@pytest.mark.asyncio
async def test_price_increase_does_not_notify(settings, sony_product):
    repository = FakeRepository(user_settings={'user-1': UserSettings(id='user-1', discord_webhook=WEBHOOK)})
    fetcher = FakeFetcher(product_page=PageScrape(price=399.0))
    notifier = FakeNotifier()

    await _orchestrator(settings, repository, fetcher, notifier).check_product(sony_product)

    assert notifier.sent == []


@pytest.mark.asyncio
async def test_drop_without_webhook_is_silent(settings, sony_product):
    repository = FakeRepository(user_settings={'user-1': UserSettings(id='user-1')})
    notifier = FakeNotifier()

    await _orchestrator(settings, repository, FakeFetcher(product_page=PageScrape(price=298.0)),
                        notifier).check_product(sony_product)

    assert notifier.sent == []


@pytest.mark.asyncio
async def test_disabled_notifications_are_not_sent(settings, sony_product):
    settings = dataclasses.replace(settings, notifications_enabled=False)
    repository = FakeRepository(user_settings={'user-1': UserSettings(id='user-1', discord_webhook=WEBHOOK)})
    notifier = FakeNotifier()

    await _orchestrator(settings, repository, FakeFetcher(product_page=PageScrape(price=298.0)),
                        notifier).check_product(sony_product)

    assert notifier.sent == []


@pytest.mark.asyncio
async def test_failed_store_write_does_not_stop_other_stores(settings, sony_product):
    repository = FakeRepository(fail_upserts_for={'eBay'})
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))

    await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert [o.store_name for o in repository.upsert_calls] == ['Amazon', 'eBay', 'Walmart', 'Target', 'Best Buy']
    assert ('prod-1', 'eBay') not in repository.comparisons
    assert len(repository.comparisons) == 4


@pytest.mark.asyncio
async def test_longer_scraped_title_replaces_stored_name(settings, sony_product):
    repository = FakeRepository()
    title = "Sony WH-1000XM5 Wireless Noise Canceling Headphones"
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0, title=title))

    await _orchestrator(settings, repository, fetcher).check_product(sony_product)

    assert repository.price_updates[0]['name'] == title


@pytest.mark.asyncio
async def test_placeholder_name_and_uk_domain(settings):
    product = TrackedProduct(
        id='prod-2',
        user_id='user-1',
        name='Scraping...',
        url='https://www.amazon.co.uk/Sony-WH-1000XM5-Headphones/dp/B09XS7JWHH',
        currency='USD',
    )
    repository = FakeRepository()
    fetcher = FakeFetcher(product_page=PageScrape(price=279.0))
    orchestrator = _orchestrator(settings, repository, fetcher)

    assert orchestrator.resolve_identity(product) == ('Sony WH 1000XM5 Headphones', 'GBP')

    await orchestrator.check_product(product)

    assert repository.price_updates[0]['currency'] == 'GBP'
    assert repository.price_updates[0]['name'] == 'Sony WH 1000XM5 Headphones'
    assert any('argos.co.uk' in url for url in fetcher.search_calls)
    assert all(o.currency == 'GBP' for o in repository.comparisons.values())


@pytest.mark.asyncio
async def test_run_checks_only_products_with_url(settings, sony_product):
    no_url = TrackedProduct(id='prod-3', user_id='user-1', name='Manual entry')
    repository = FakeRepository(products=[sony_product, no_url])
    fetcher = FakeFetcher(product_page=PageScrape(price=298.0))

    summary = await _orchestrator(settings, repository, fetcher).run()

    assert summary.checked == 1
    assert summary.succeeded == 1
    assert [u['id'] for u in repository.price_updates] == ['prod-1']


@pytest.mark.asyncio
async def test_run_continues_after_failed_product(settings, sony_product):
    other = dataclasses.replace(sony_product, id='prod-9')
    repository = FakeRepository(products=[sony_product, other])

    class FlakyFetcher(FakeFetcher):
        async def fetch_product_page(self, url, price_selector, wait_selector=None):
            self.product_calls.append(url)
            return None if len(self.product_calls) == 1 else PageScrape(price=298.0)

    summary = await _orchestrator(settings, repository, FlakyFetcher()).run()

    assert (summary.checked, summary.failed, summary.succeeded) == (2, 1, 1)
    assert repository.failed_ids == ['prod-1']


@pytest.mark.asyncio
async def test_run_ends_cleanly_when_products_cannot_be_read(settings):
    class BrokenRepository(FakeRepository):
        def fetch_products_with_url(self):
            raise RepositoryError("connection refused")

    summary = await _orchestrator(settings, BrokenRepository(), FakeFetcher()).run()

    assert summary == RunSummary()
