from finance_ledger.cli import app

app()
