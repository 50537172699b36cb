from mealplanner.cli import main

main()
