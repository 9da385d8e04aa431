from md_paginator.cli import app

app()
