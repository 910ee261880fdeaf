"""
Calcpad Web Portal Launcher
Simple script to start the web server
"""
import sys
import os

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    print("Starting Calcpad Web Portal...")
    print()

    try:
        from app_logging import setup_logging
        import api
    except ImportError as e:
        print(f"Error importing modules: {e}")
        print("\nMake sure you have installed the required dependencies:")
        print("  pip install -e .")
        sys.exit(1)

    setup_logging()
    try:
        api.run_server()
    except OSError as e:
        print(f"Error starting server: {e}")
        print("\nTroubleshooting:")
        print("1. Check if another application is using the port")
        print("2. Set CALCPAD_PORT to use a different port")
        print("3. Check firewall settings")
        sys.exit(1)


if __name__ == "__main__":
    main()
