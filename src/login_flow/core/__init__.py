"""Reactive core of the login flow: dispatcher, signals, rules and controller."""
