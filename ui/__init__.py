# -*- coding: utf-8 -*-
"""
WanderCrew UI layer.
"""
