"""
Generate plausible synthetic MCP server and API service listings.

Growth rates come from two perturbed snapshots of the same base metric
(current vs. a slightly earlier value), so each (metric, growth) pair is
internally consistent even though both are invented.
"""
from __future__ import annotations
import datetime as dt
import random
from typing import List, Optional

from app.common import utcnow
from backend.models import API, MCP, APIService, MCPServer, coerce_category

# (name, author, category, base downloads)
MCP_SEEDS = [
    ("@anthropic/claude-tools", "Anthropic", "AI/ML", 250000),
    ("@github/copilot-mcp", "GitHub", "Development Tools", 180000),
    ("@openai/gpt-connector", "OpenAI", "AI/ML", 220000),
    ("@stripe/payment-mcp", "Stripe", "Payment", 150000),
    ("@aws/s3-mcp", "Amazon", "Cloud Storage", 200000),
    ("@google/firebase-mcp", "Google", "Database", 170000),
    ("@slack/workspace-mcp", "Slack", "Communication", 140000),
    ("@docker/container-mcp", "Docker Inc.", "DevOps", 160000),
    ("@postgres/database-mcp", "PostgreSQL", "Database", 190000),
    ("@redis/cache-mcp", "Redis Labs", "Database", 130000),
    ("@mongodb/atlas-mcp", "MongoDB", "Database", 145000),
    ("@twilio/communications-mcp", "Twilio", "Communication", 120000),
    ("@datadog/monitoring-mcp", "Datadog", "Monitoring", 110000),
    ("@elastic/search-mcp", "Elastic", "Search", 135000),
    ("@vercel/deployment-mcp", "Vercel", "DevOps", 125000),
    ("@netlify/hosting-mcp", "Netlify", "DevOps", 115000),
    ("@supabase/backend-mcp", "Supabase", "Database", 105000),
    ("@pinecone/vector-mcp", "Pinecone", "AI/ML", 95000),
    ("@langchain/llm-mcp", "LangChain", "AI/ML", 100000),
    ("@discord/bot-mcp", "Discord", "Communication", 130000),
]

# (name, provider, category, base requests)
API_SEEDS = [
    ("Stripe API", "Stripe", "Payment", 5000000),
    ("OpenAI API", "OpenAI", "AI/ML", 4500000),
    ("Google Maps API", "Google", "Geolocation", 6000000),
    ("Twilio SMS API", "Twilio", "Communication", 3500000),
    ("SendGrid Email API", "SendGrid", "Communication", 4000000),
    ("AWS S3 API", "Amazon", "Cloud Storage", 7000000),
    ("GitHub API", "GitHub", "Development", 5500000),
    ("Slack API", "Slack", "Communication", 3000000),
    ("Firebase Auth API", "Google", "Authentication", 4200000),
    ("Cloudinary API", "Cloudinary", "Media", 2800000),
    ("Algolia Search API", "Algolia", "Search", 3200000),
    ("Auth0 API", "Auth0", "Authentication", 2500000),
    ("Mapbox API", "Mapbox", "Geolocation", 2900000),
    ("Sentry API", "Sentry", "Monitoring", 2300000),
    ("Mixpanel API", "Mixpanel", "Analytics", 2100000),
    ("Segment API", "Segment", "Analytics", 2400000),
    ("Contentful API", "Contentful", "CMS", 1900000),
    ("Shopify API", "Shopify", "E-commerce", 3800000),
    ("Square API", "Square", "Payment", 3300000),
    ("Plaid API", "Plaid", "Finance", 2700000),
]

def _snapshots(base: int, spread: float, drift: float, rng: random.Random) -> tuple[int, float]:
    """Return (current, growth %) from a perturbed current and an earlier value."""
    variation = rng.uniform(-spread, spread)
    current = int(base * (1 + variation))
    previous = int(base * (1 + variation - drift))
    growth = (current - previous) / previous * 100
    return current, round(growth, 1)

def _recent_iso(days: int, rng: random.Random) -> str:
    ts = utcnow() - dt.timedelta(seconds=rng.random() * days * 24 * 3600)
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")

def generate_mcp_servers(rng: Optional[random.Random] = None) -> List[MCPServer]:
    rng = rng or random.Random()
    servers = []
    for i, (name, author, category, base) in enumerate(MCP_SEEDS, start=1):
        downloads, growth = _snapshots(base, 0.05, 0.02, rng)
        servers.append(MCPServer(
            id=f"mcp-{i}",
            name=name,
            description=f"Enterprise-grade MCP server for {category.lower()} integration",
            author=author,
            version=f"{rng.randint(1, 3)}.{rng.randrange(10)}.{rng.randrange(20)}",
            downloads=downloads,
            rating=round(4 + rng.random(), 1),
            reviews=int(downloads / 100 + rng.random() * 500),
            category=coerce_category(category, MCP),
            tags=[category.lower(), "mcp", "integration"],
            repository=f"https://github.com/{'-'.join(author.lower().split())}/{name.split('/')[1]}",
            last_updated=_recent_iso(7, rng),
            growth_rate=growth,
        ))
    return servers

def generate_api_services(rng: Optional[random.Random] = None) -> List[APIService]:
    rng = rng or random.Random()
    services = []
    for i, (name, provider, category, base) in enumerate(API_SEEDS, start=1):
        requests, growth = _snapshots(base, 0.075, 0.03, rng)
        services.append(APIService(
            id=f"api-{i}",
            name=name,
            description=f"High-performance {category} API with enterprise features",
            provider=provider,
            version=f"v{rng.randint(1, 3)}",
            requests=requests,
            uptime=round(99.5 + rng.random() * 0.49, 3),
            latency=rng.randrange(50, 200),
            category=coerce_category(category, API),
            tags=[category.lower(), "api", "rest"],
            documentation=f"https://docs.{provider.lower()}.com/api",
            last_updated=_recent_iso(3, rng),
            growth_rate=growth,
        ))
    return services
