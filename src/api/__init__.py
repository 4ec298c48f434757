"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests e parsear o JSON de entrada
- Mapear erros do core para status HTTP
- Propagar correlation_id

NÃO PODE conter: montagem MIME, autenticação, chamadas à Gmail API.
"""
