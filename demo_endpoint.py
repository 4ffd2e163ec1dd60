"""
Quick local server for trying the picker endpoints.

Starts uvicorn with auto-reload and prints the main endpoints.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting NomNomNow Backend")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Picker Chat:   POST http://localhost:8000/picker/chat")
    print("   - Discover:      POST http://localhost:8000/picker/discover")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("Authentication:")
    print("   All endpoints except /health, /currencies and /users/{username}")
    print("   require: Authorization: Bearer <supabase access token>")
    print()
    print("Test with curl:")
    print('   curl -X POST "http://localhost:8000/picker/chat" \\')
    print('     -H "Authorization: Bearer <token>" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"messages": [{"role": "user", "content": "cheap and warm"}]}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("=" * 60)

    uvicorn.run(
        "nomnom.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
