#!/usr/bin/env python3
"""
Development startup script for the FastAPI backend
"""
import os

import uvicorn


def main():
    # Set development environment unless the caller chose otherwise
    os.environ.setdefault('ENVIRONMENT', 'development')
    port = int(os.environ.setdefault('PORT', '3000'))

    # Start FastAPI with hot reload
    uvicorn.run(
        'prophecy_watch.main:app',
        host='0.0.0.0',
        port=port,
        reload=os.environ['ENVIRONMENT'] == 'development',
    )

if __name__ == "__main__":
    main()
