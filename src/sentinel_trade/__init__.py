"""SentinelTrade core: resilient cache, price alerts and webhook delivery."""
