"""Rotas do webhook WhatsApp."""
