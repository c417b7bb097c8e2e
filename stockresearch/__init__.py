"""Stock research service: OTP login, synthesized research, tile reconciliation."""
