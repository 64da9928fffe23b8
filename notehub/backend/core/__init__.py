# Core infrastructure: config, logging, database, security, errors
