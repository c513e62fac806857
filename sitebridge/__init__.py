"""sitebridge: multi-site routing with cross-domain sessions."""
