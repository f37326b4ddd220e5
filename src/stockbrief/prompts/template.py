"""Base analysis prompt.

Placeholders (``string.Template`` syntax):

- ``$stock_symbol``: upper-cased ticker
- ``$investor_profile``: reader description, see ``INVESTOR_PROFILES``
- ``$stock_page_data``: visible text of the stock landing page
- ``$api_data``: one block per JSON endpoint
"""

from string import Template

PLACEHOLDERS = ("stock_symbol", "investor_profile", "stock_page_data", "api_data")

DEFAULT_SALARY = 50000

# `{salary}` is filled in with the monthly salary before template substitution
INVESTOR_PROFILES: dict[str, dict[str, str]] = {
    "new_graduate": {
        "label": "New Graduate",
        "description": "Limited investment experience, ₹50k/month salary",
        "profile": (
            "a new graduate investor who: has limited investment experience, earns "
            "₹{salary}/month, and needs clear, conservative, and actionable advice"
        ),
    },
    "experienced": {
        "label": "Experienced Investor",
        "description": "Significant investment experience",
        "profile": (
            "an experienced investor who: has significant investment experience, earns "
            "₹{salary}/month, and expects a rigorous, data-heavy assessment"
        ),
    },
    "conservative": {
        "label": "Conservative",
        "description": "Risk-averse approach",
        "profile": (
            "a risk-averse investor who: earns ₹{salary}/month (conservative approach) "
            "and puts capital preservation ahead of returns"
        ),
    },
    "aggressive": {
        "label": "Aggressive",
        "description": "Higher risk tolerance",
        "profile": (
            "a growth-focused investor who: tolerates higher risk, earns ₹{salary}/month, "
            "and needs balanced, and actionable advice"
        ),
    },
}

DEFAULT_INVESTOR_TYPE = "new_graduate"

SALARY_RANGES = [
    {"value": 30000, "label": "₹30,000/month"},
    {"value": 50000, "label": "₹50,000/month"},
    {"value": 75000, "label": "₹75,000/month"},
    {"value": 100000, "label": "₹1,00,000/month"},
]

RISK_LEVELS = [
    {"value": "low", "label": "Low Risk", "description": "Capital preservation focus"},
    {"value": "medium", "label": "Medium Risk", "description": "Balanced approach"},
    {"value": "high", "label": "High Risk", "description": "Growth focus"},
]

BASE_PROMPT = Template(
    """# Comprehensive Stock Analysis Prompt for $stock_symbol

## Context
You are a **senior financial analyst** with over 15 years of experience in equity research. Your task is to conduct a thorough, data-driven analysis of **$stock_symbol** and produce a comprehensive investment report.

## Investor Profile
Write the report for $investor_profile.

## Your Task
Analyze the provided STOCK PAGE DATA and API DATA for **$stock_symbol**. Follow the **Data Mapping Guide** below to locate and interpret the information needed for each section of your analysis. Use your search capabilities only to supplement this data with the latest market context or to verify critical figures. Treat the provided data as the primary source of truth.

## Data Mapping Guide

### 1. For Business & Industry Analysis:
* **Company Description & Business Model:** Use the main text description at the top of the **STOCK PAGE DATA**.
* **Industry Position & Peer Comparison:** Use the **PEERS DATA** block in the API data. Compare Market Cap (mcap), PE (pe), ROCE (roce) and Debt-to-Equity (de).
* **Growth Drivers & Recent Developments:** Synthesize the "Recent events" and "News" items in the **STOCK PAGE DATA**.

### 2. For Financial Health Assessment:
* **Key Snapshot Metrics (PE, P/B, Div.Yield, ROE, ROCE, EPS):** Read them from the metrics table at the top of the **STOCK PAGE DATA**.
* **Yearly Financial Trends (Revenue, Net Profit):** In **API DATA**, use **FINANCIALS DATA** -> Summary. For a detailed P&L use **FINANCIALS DATA** -> Profit & Loss -> yearly and TTM.
* **Balance Sheet Strength (Assets, Liabilities):** In **API DATA**, use **FINANCIALS DATA** -> Balance Sheet.
* **Cash Flow Analysis (Operating, Investing, Financing):** In **API DATA**, use **FINANCIALS DATA** -> Cash Flow.
* **Revenue Mix (Product & Location):** In **API DATA**, use the **REVENUE_MIX DATA** block.

### 3. For Valuation Analysis:
* **Current PE & Sector PE:** From the metrics table in the **STOCK PAGE DATA**.
* **Price to Book (P/B):** From the metrics table in the **STOCK PAGE DATA**.
* **52-week Range (High/Low):** In both the **STOCK PAGE DATA** and the **PRICE DATA** block.
* **Historical Returns (1M, 1YR, 5Y):** In **API DATA**, use **PRICE DATA** -> returns.

### 4. For Risk Assessment & Shareholding:
* **Sector, Company-Specific, and Market Risks:** Read the news items under "Recent events" in the **STOCK PAGE DATA** for geopolitical, tariff, competition and regulatory context.
* **Shareholding Pattern (Promoter, FII, DII, Retail):** In **API DATA**, analyze the **SHAREHOLDINGS DATA** trend over the available quarters.

## Analysis & Reporting Framework

### 1. Executive Summary (2-3 paragraphs)
-   A concise overview of the company and its business.
-   The core investment thesis: the key reasons to buy, hold, or sell.
-   A summary of the risk-reward profile.
-   Your final, bottom-line recommendation.

---

### 2. Detailed Analysis

#### A. Business & Industry Analysis
-   **Business Model**: How does the company make money? What are its core operations?
-   **Competitive Advantages (Moat)**: What protects it from competitors? How does it compare with peers in the data?
-   **Industry Position**: Is it a market leader? What are the industry's growth prospects and headwinds based on the news?
-   **Management Quality**: Infer from corporate actions and news. Note if data is limited.

#### B. Financial Health Assessment
-   **Revenue & Profitability Trends**: Growth and consistency of revenue and net profit over the last 3-5 years.
-   **Balance Sheet Strength**: Debt levels, assets, and liabilities.
-   **Cash Flow Analysis**: Is operating cash flow consistently positive?
-   **Efficiency Ratios**: Interpret ROE and ROCE.

#### C. Valuation Analysis
-   **Relative Valuation**: Current PE against the sector and key competitors.
-   **Price Action**: Position relative to the 52-week high and low.
-   **Fair Value Conclusion**: A qualitative conclusion on valuation.

#### D. Risk Analysis
-   **Geopolitical/Market Risks**: Key risks highlighted in the news.
-   **Company-Specific Risks**: Internal risks mentioned in the data.
-   **Shareholding Trends**: Is promoter holding rising or falling? Are FIIs/DIIs buying or selling?

---

### 3. Investment Thesis & Final Recommendation

**Investment Profile:**
-   **Risk Level**: [Low / Medium / High]
-   **Suitable Investor**: [e.g., Growth / Value / Dividend-focused / High-risk tolerant]
-   **Investment Horizon**: [Short-term (1-3 years) / Long-term (5+ years)]

**Verdict & Strategy:**
-   **Recommendation**: **[BUY / HOLD / SELL]**
-   **Justification**: A clear, evidence-based reason linked back to the data.
-   **Key Factors to Monitor**: 3-4 metrics or news themes to track.

## Important Guidelines
-   **Be Objective**: Present both the bull case and the bear case.
-   **Be Data-Driven**: Base all claims on the data blocks mapped above.
-   **Focus on Fundamentals**: Prioritize long-term fundamentals over short-term fluctuations.

---
## Data to Analyze
*This is the primary data for your analysis. Follow the Data Mapping Guide to interpret these blocks.*

### STOCK PAGE DATA:
$stock_page_data

### API DATA:
$api_data
---"""
)
