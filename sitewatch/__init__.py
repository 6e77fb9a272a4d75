"""Listing site watcher.

Periodically crawls a paginated HTML listing, maps every listing row to a
typed record and upserts it into SQLite.

Key modules:
    extract      -- digit-run and year/month extraction from text fragments
    mapper       -- map_listing: positional mapping of one row to a ListingRecord
    parser       -- PageProcessor, pagination discovery, ListingSelectors
    base         -- BaseCrawler abstract class (fetch + process one job)
    crawlers     -- RequestsCrawler, CurlCrawler concrete implementations
    factory      -- CrawlerFactory for creating crawlers by fetcher name
    jobs         -- JobQueue, the unbounded job hand-off
    controller   -- WorkerPool draining the job queue
    scheduler    -- Scheduler re-discovering pages on an interval
    rate_limiter -- RateLimiter shared by every fetch
    storage      -- ListingStore and SqliteListingStore
    session      -- CrawlSession implementing the operator commands
    metrics      -- MetricsCollector for crawl statistics
    models       -- ListingRecord, CrawlJob, CrawlResult, CrawlStats dataclasses
    errors       -- exception hierarchy
    config       -- WatchConfig and JSON loading
    logger       -- colored logging setup
"""
