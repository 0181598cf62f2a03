"""
Prometheus metrics shared by the API and the transaction engine
"""

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
ACTIVE_CONNECTIONS = Gauge('http_active_connections', 'Number of active HTTP connections')

# outcome is one of: succeeded, settlement_failed
TRANSACTION_COUNT = Counter(
    'wallet_transactions_total',
    'Wallet transactions persisted by the engine',
    ['type', 'outcome']
)
FRAUD_ALERT_COUNT = Counter('wallet_fraud_alerts_total', 'Suspicious operations reported to admins', ['type'])
