# Event consumers package
