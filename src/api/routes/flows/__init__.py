"""Rotas de Flows (verificação e submissão)."""
