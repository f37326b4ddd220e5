"""Example ticker symbols per exchange, shown by the CLI and the API."""

EXAMPLE_STOCKS: dict[str, list[dict[str, str]]] = {
    "BSE": [
        {"symbol": "RELIANCE", "name": "Reliance Industries"},
        {"symbol": "TCS", "name": "Tata Consultancy Services"},
        {"symbol": "INFY", "name": "Infosys Limited"},
        {"symbol": "HDFCBANK", "name": "HDFC Bank"},
        {"symbol": "ICICIBANK", "name": "ICICI Bank"},
        {"symbol": "DEEPAKNTR", "name": "Deepak Nitrite"},
        {"symbol": "TATAMOTORS", "name": "Tata Motors"},
        {"symbol": "WIPRO", "name": "Wipro Limited"},
    ],
    "NSE": [
        {"symbol": "RELIANCE", "name": "Reliance Industries"},
        {"symbol": "TCS", "name": "Tata Consultancy Services"},
        {"symbol": "INFY", "name": "Infosys Limited"},
        {"symbol": "HDFCBANK", "name": "HDFC Bank"},
        {"symbol": "ICICIBANK", "name": "ICICI Bank"},
        {"symbol": "TATAMOTORS", "name": "Tata Motors"},
        {"symbol": "WIPRO", "name": "Wipro Limited"},
        {"symbol": "BHARTIARTL", "name": "Bharti Airtel"},
        {"symbol": "AIRAN", "name": "Airan Limited"},
    ],
}
