"""
Documentos (v1).

- Every document belongs to one Empresa and one Responsavel
- Temporal status (valid/expiring/expired) is derived from data_vencimento, never stored
- Andamentos form an append-only history per document
- At most one attached file per document, stored on local disk
"""
