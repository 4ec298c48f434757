"""Rotas de envio de email."""
