"""
Empresas: companies whose documents are tracked.

The CNPJ is stored digits-only and must pass the check-digit test.
"""
