# Repositories package
