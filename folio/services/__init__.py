"""Application services: holdings, prices, history, market data."""
