# Change relay and live publication delivery
