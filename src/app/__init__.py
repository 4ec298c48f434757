"""App — núcleo do serviço: casos de uso, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso
- services/: montagem MIME, sanitização, freios de segurança
- infra/: implementações concretas de IO (IAM, OAuth, Gmail)
- protocols/: contratos/interfaces
- domain/: modelos de domínio
- observability/: correlation_id e métricas
- constants/: constantes de protocolo

Padrão: app executa; api adapta; config configura; utils apoia.
"""
