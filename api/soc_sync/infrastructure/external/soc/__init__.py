"""
Integracion one-way con el SOC (Sistema Ocupacional): SOC -> PostgreSQL.

El paquete solo habla con el web service; la reconciliacion contra la base
local vive en la capa de aplicacion.
"""
